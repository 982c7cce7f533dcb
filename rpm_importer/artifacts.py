"""Artifact graph resolution -- everything PNC built alongside the wrapped GAV."""

from __future__ import annotations

import logging

from rpm_importer.client.orch import OrchClient
from rpm_importer.models import POM_TYPE, ArtifactRecord, BuildCoordinate, BuildRecord

logger = logging.getLogger("rpm_importer.artifacts")


class ArtifactGraphResolver:
    """Coordinate -> artifact -> build -> all artifacts built by that build.

    Three round trips: PNC has no direct GAV-to-build query.
    """

    def __init__(self, orch: OrchClient):
        self.orch = orch

    def find_build_record(self, coordinate: BuildCoordinate) -> BuildRecord | None:
        """Look up the pom artifact for *coordinate*; None if PNC does not track it."""
        pom = coordinate.with_type(POM_TYPE)
        matches = self.orch.list_artifacts(pom.identifier)
        if not matches:
            logger.warning("Unable to find an artifact from GAV %s", coordinate.gav)
            return None
        if len(matches) > 1:
            logger.warning("Found %d artifacts for %s; using the first (%s)", len(matches), pom, matches[0].id)

        artifact_id = matches[0].id
        logger.info("Retrieved artifact %s", artifact_id)
        artifact = self.orch.get_artifact(artifact_id)
        return BuildRecord(
            id=artifact.id,
            coordinate=BuildCoordinate.parse(artifact.identifier),
            build_id=artifact.build.id if artifact.build else None,
            import_date=artifact.import_date,
        )

    def resolve(self, coordinate: BuildCoordinate) -> list[ArtifactRecord]:
        """Return the sorted artifacts built together with *coordinate*.

        An untracked coordinate, or an artifact that was imported rather than
        built, yields an empty list.
        """
        record = self.find_build_record(coordinate)
        if record is None:
            return []
        if record.build_id is None:
            logger.warning("Unable to find build information for artifact (Import: %s)", record.import_date)
            return []

        logger.info(
            "For artifact %s found artifactId %s with buildId %s",
            coordinate.gav, record.id, record.build_id,
        )
        built = self.orch.list_built_artifacts(record.build_id)
        dependencies = sorted(
            (ArtifactRecord.from_identifier(a.identifier) for a in built),
            key=lambda a: a.identifier,
        )
        logger.info("Found dependencies %s", [str(d) for d in dependencies])
        return dependencies
