"""Reqour client -- translates external SCM URLs to their internal mirror."""
from __future__ import annotations

import logging

from rpm_importer.client.base import BaseClient
from rpm_importer.errors import ServiceError
from rpm_importer.models import TranslateResponse

logger = logging.getLogger("rpm_importer.client.reqour")


class ReqourClient(BaseClient):
    service = "Reqour"

    def external_to_internal(self, external_url: str) -> str:
        data = self._post("/external-to-internal", body={"externalUrl": external_url})
        try:
            response = TranslateResponse.model_validate(data)
        except ValueError as exc:
            raise ServiceError(f"Reqour returned no internal URL for {external_url}: {data}") from exc
        if not response.internal_url:
            raise ServiceError(f"Reqour returned an empty internal URL for {external_url}")
        return response.internal_url
