"""Base sync HTTP client with retry logic."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from rpm_importer.errors import ServiceError

logger = logging.getLogger("rpm_importer.client")


class BaseClient:
    """Thin HTTP wrapper around httpx.

    ``token_supplier`` is called lazily; when it returns a token every request
    carries ``Authorization: Bearer <token>``.
    """

    service = "service"

    def __init__(
        self,
        base_url: str,
        *,
        token_supplier: Callable[[], str | None] | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._token_supplier = token_supplier
        self._client: httpx.Client | None = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        token = self._token_supplier() if self._token_supplier else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, *, body: dict | None = None, params: dict | None = None) -> Any:
        """Make an HTTP request with retry logic for 5xx and connection errors."""
        last_exc: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                client = self._ensure_client()
                resp = client.request(method, path, json=body, params=params, headers=self._headers())
            except (httpx.ConnectError, httpx.TimeoutException) as exc:
                last_exc = exc
                if attempt < self.max_retries:
                    delay = min(self.retry_delay * (2 ** attempt), 30.0)
                    logger.warning("Connection error on %s %s (attempt %d), retrying in %.1fs", method, path, attempt + 1, delay)
                    time.sleep(delay)
                    continue
                break
            if resp.status_code >= 500 and attempt < self.max_retries:
                logger.warning("Server error %d on %s %s (attempt %d)", resp.status_code, method, path, attempt + 1)
                time.sleep(self.retry_delay * (attempt + 1))
                continue
            if resp.status_code >= 400:
                raise ServiceError(
                    f"{self.service} error {resp.status_code} on {method} {path}: {resp.text[:500]}"
                )
            if resp.status_code == 204 or not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError as exc:
                raise ServiceError(f"{self.service} returned invalid JSON for {method} {path}: {exc}") from exc
        raise ServiceError(f"Cannot reach {self.service} at {self.base_url}: {last_exc}") from last_exc

    def _get(self, path: str, **params) -> Any:
        return self._request("GET", path, params=params if params else None)

    def _post(self, path: str, body: dict | None = None) -> Any:
        return self._request("POST", path, body=body)

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
