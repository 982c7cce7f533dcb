"""PNC orchestration (Orch) REST client."""
from __future__ import annotations

import logging

from rpm_importer.client.base import BaseClient
from rpm_importer.errors import ServiceError
from rpm_importer.models import Artifact, Page, RepositoryCreationResponse, ScmRepository

logger = logging.getLogger("rpm_importer.client.orch")

REST_PREFIX = "/pnc-rest/v2"
PAGE_SIZE = 200


class OrchClient(BaseClient):
    service = "PNC"

    def __init__(self, base_url: str, **kwargs):
        base_url = base_url.rstrip("/")
        if not base_url.endswith(REST_PREFIX):
            base_url += REST_PREFIX
        super().__init__(base_url, **kwargs)

    def _page(self, model, path: str, **params) -> Page:
        data = self._get(path, **params)
        try:
            return Page[model].model_validate(data)
        except ValueError as exc:
            raise ServiceError(f"PNC returned an unexpected page for {path}: {exc}") from exc

    def _all_pages(self, model, path: str, **params) -> list:
        """Follow ``pageIndex`` until ``totalPages`` is reached."""
        items: list = []
        index = 0
        while True:
            page = self._page(model, path, pageIndex=index, pageSize=PAGE_SIZE, **params)
            items.extend(page.content)
            index += 1
            if index >= page.total_pages:
                return items

    # ── SCM repositories ──────────────────────────────────────────────

    def list_repositories(self, match_url: str) -> list[ScmRepository]:
        """Repositories whose internal or external URL matches *match_url*."""
        return self._page(ScmRepository, "/scm-repositories", matchUrl=match_url).content

    def create_and_sync(self, scm_url: str) -> RepositoryCreationResponse:
        data = self._post("/scm-repositories/create-and-sync", body={"scmUrl": scm_url})
        try:
            return RepositoryCreationResponse.model_validate(data)
        except ValueError as exc:
            raise ServiceError(f"PNC returned an unexpected create-and-sync response: {exc}") from exc

    # ── Artifacts ─────────────────────────────────────────────────────

    def list_artifacts(self, identifier: str) -> list[Artifact]:
        return self._page(Artifact, "/artifacts", identifier=identifier).content

    def get_artifact(self, artifact_id: str) -> Artifact:
        data = self._get(f"/artifacts/{artifact_id}")
        try:
            return Artifact.model_validate(data)
        except ValueError as exc:
            raise ServiceError(f"PNC returned an unexpected artifact {artifact_id}: {exc}") from exc

    def list_built_artifacts(self, build_id: str) -> list[Artifact]:
        return self._all_pages(Artifact, f"/builds/{build_id}/artifacts/built")
