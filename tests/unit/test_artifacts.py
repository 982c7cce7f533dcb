"""Unit tests for the artifact graph resolver."""

from __future__ import annotations

from unittest.mock import MagicMock

from rpm_importer.artifacts import ArtifactGraphResolver
from rpm_importer.models import Artifact, BuildCoordinate, BuildRef


COORDINATE = BuildCoordinate("org.apache.sshd", "sshd", "2.14.0.redhat-00002")


def _artifact(identifier: str, id: str = "1", build_id: str | None = None) -> Artifact:
    return Artifact(id=id, identifier=identifier, build=BuildRef(id=build_id) if build_id else None)


def _orch(matches, artifact=None, built=()):
    orch = MagicMock()
    orch.list_artifacts.return_value = list(matches)
    orch.get_artifact.return_value = artifact
    orch.list_built_artifacts.return_value = list(built)
    return orch


class TestFindBuildRecord:
    def test_queries_pom_identifier(self):
        pom = _artifact("org.apache.sshd:sshd:pom:2.14.0.redhat-00002", id="42", build_id="100")
        orch = _orch([pom], artifact=pom)

        record = ArtifactGraphResolver(orch).find_build_record(COORDINATE)

        orch.list_artifacts.assert_called_once_with("org.apache.sshd:sshd:pom:2.14.0.redhat-00002")
        orch.get_artifact.assert_called_once_with("42")
        assert record.build_id == "100"
        assert record.coordinate.type == "pom"

    def test_no_match(self):
        orch = _orch([])
        assert ArtifactGraphResolver(orch).find_build_record(COORDINATE) is None
        orch.get_artifact.assert_not_called()

    def test_first_of_several(self):
        first = _artifact("org.apache.sshd:sshd:pom:2.14.0.redhat-00002", id="1", build_id="10")
        second = _artifact("org.apache.sshd:sshd:pom:2.14.0.redhat-00002", id="2", build_id="20")
        orch = _orch([first, second], artifact=first)

        record = ArtifactGraphResolver(orch).find_build_record(COORDINATE)

        orch.get_artifact.assert_called_once_with("1")
        assert record.build_id == "10"


class TestResolve:
    def test_absent_build_linkage_gives_empty(self):
        imported = _artifact("org.apache.sshd:sshd:pom:2.14.0.redhat-00002", id="42")
        orch = _orch([imported], artifact=imported)

        assert ArtifactGraphResolver(orch).resolve(COORDINATE) == []
        orch.list_built_artifacts.assert_not_called()

    def test_untracked_coordinate_gives_empty(self):
        assert ArtifactGraphResolver(_orch([])).resolve(COORDINATE) == []

    def test_sorted_dependencies(self):
        pom = _artifact("org.apache.sshd:sshd:pom:2.14.0.redhat-00002", id="42", build_id="100")
        built = [_artifact("b:b:jar:1"), _artifact("a:a:jar:1"), _artifact("c:c:jar:2")]
        orch = _orch([pom], artifact=pom, built=built)

        dependencies = ArtifactGraphResolver(orch).resolve(COORDINATE)

        orch.list_built_artifacts.assert_called_once_with("100")
        assert [d.identifier for d in dependencies] == ["a:a:jar:1", "b:b:jar:1", "c:c:jar:2"]
