"""Bearer token acquisition for PNC (env token or Keycloak)."""
from __future__ import annotations

import logging

import httpx

from rpm_importer.config import KeycloakConfig, ProfileConfig
from rpm_importer.errors import ConfigError, ServiceError

logger = logging.getLogger("rpm_importer.client.auth")


class TokenSupplier:
    """Fetches the token once per run and hands out the cached value."""

    def __init__(self, profile: ProfileConfig, timeout: float = 30.0):
        self._profile = profile
        self._timeout = timeout
        self._token: str | None = profile.token

    def __call__(self) -> str | None:
        if self._token is None and self._profile.keycloak is not None:
            self._token = self._fetch(self._profile.keycloak)
        return self._token

    def _grant(self, keycloak: KeycloakConfig) -> dict[str, str]:
        if keycloak.client_secret:
            return {
                "grant_type": "client_credentials",
                "client_id": keycloak.client_id,
                "client_secret": keycloak.client_secret,
            }
        if keycloak.username and keycloak.password:
            return {
                "grant_type": "password",
                "client_id": keycloak.client_id,
                "username": keycloak.username,
                "password": keycloak.password,
            }
        raise ConfigError("Keycloak configured without clientSecret or username/password")

    def _fetch(self, keycloak: KeycloakConfig) -> str:
        form = self._grant(keycloak)
        logger.debug("Requesting %s token from %s", form["grant_type"], keycloak.token_url)
        try:
            resp = httpx.post(keycloak.token_url, data=form, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise ServiceError(f"Cannot obtain token from Keycloak at {keycloak.url}: {e}") from e
        if resp.status_code != 200:
            raise ServiceError(f"Keycloak token request failed ({resp.status_code}): {resp.text[:200]}")
        token = resp.json().get("access_token")
        if not token:
            raise ServiceError("Keycloak response carried no access_token")
        return token
