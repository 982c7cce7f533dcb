"""Unit tests for coordinates, artifact records and the version descriptor."""

from __future__ import annotations

import pytest

from rpm_importer.errors import FormatError
from rpm_importer.models import (
    Artifact,
    ArtifactRecord,
    BuildCoordinate,
    BuildInfo,
    Page,
    RepositoryCreationResponse,
    VersionDescriptor,
)


# ---------------------------------------------------------------------------
# BuildCoordinate
# ---------------------------------------------------------------------------


class TestBuildCoordinate:
    def test_parse_gav(self):
        c = BuildCoordinate.parse("org.apache.sshd:sshd:2.14.0")
        assert c == BuildCoordinate("org.apache.sshd", "sshd", "2.14.0")
        assert c.type is None
        assert c.identifier == "org.apache.sshd:sshd:2.14.0"

    def test_parse_typed(self):
        c = BuildCoordinate.parse("org.apache.sshd:sshd:pom:2.14.0")
        assert c.type == "pom"
        assert c.version == "2.14.0"
        assert c.classifier is None

    def test_parse_classified(self):
        c = BuildCoordinate.parse("g:a:tar.gz:1.0:project-sources")
        assert c.type == "tar.gz"
        assert c.version == "1.0"
        assert c.classifier == "project-sources"
        assert c.identifier == "g:a:tar.gz:1.0:project-sources"

    @pytest.mark.parametrize("identifier", ["g:a", "g::1.0", "a:b:c:d:e:f", ""])
    def test_parse_invalid(self, identifier):
        with pytest.raises(FormatError, match="Invalid artifact identifier"):
            BuildCoordinate.parse(identifier)

    def test_with_type(self):
        c = BuildCoordinate("g", "a", "1").with_type("pom")
        assert c.identifier == "g:a:pom:1"
        assert c.gav == "g:a:1"


# ---------------------------------------------------------------------------
# ArtifactRecord
# ---------------------------------------------------------------------------


class TestArtifactRecord:
    def test_defaults(self):
        record = ArtifactRecord.from_identifier("g:a:jar:1.0")
        assert record.type == "jar"
        assert record.classifier == ""
        assert record.file_name == "a-1.0.jar"

    def test_project_sources_file_name(self):
        record = ArtifactRecord.from_identifier(
            "org.apache.sshd:sshd:tar.gz:2.14.0.redhat-00002:project-sources"
        )
        assert record.file_name == "sshd-2.14.0.redhat-00002-project-sources.tar.gz"

    def test_sorted_by_identifier(self):
        records = [ArtifactRecord.from_identifier(i) for i in ("b:b:jar:1", "a:a:jar:1", "c:c:jar:2")]
        ordered = sorted(records, key=lambda r: r.identifier)
        assert [str(r) for r in ordered] == ["a:a:jar:1", "b:b:jar:1", "c:c:jar:2"]


# ---------------------------------------------------------------------------
# VersionDescriptor
# ---------------------------------------------------------------------------


class TestVersionDescriptor:
    def test_parse_fields(self):
        v = VersionDescriptor.parse("1.2.3 1.2.3.redhat-1 alpha rel 00007 redhat-1")
        assert v.raw_version == "1.2.3"
        assert v.named_version == "1.2.3.redhat-1"
        assert v.alpha_tag == "alpha"
        assert v.release_tag == "rel"
        assert v.serial == "00007"
        assert v.named_version_release == "redhat-1"

    def test_original_version(self):
        v = VersionDescriptor.parse("1.2.3 1.2.3.redhat-1 alpha rel 00007 redhat-1")
        assert v.original_version == "1.2.3"

    def test_trailing_newline_ignored(self):
        v = VersionDescriptor.parse("1.2.3 1.2.3.redhat-1 alpha rel 00007 redhat-1\n")
        assert v.original_version == "1.2.3"

    def test_suffix_mismatch(self):
        v = VersionDescriptor.parse("1.2.3 1.2.3.redhat-2 alpha rel 00007 redhat-1")
        with pytest.raises(FormatError, match="unable to determine original version"):
            v.original_version

    def test_suffix_without_dot(self):
        v = VersionDescriptor.parse("1.2.3 1.2.3redhat-1 alpha rel 00007 redhat-1")
        with pytest.raises(FormatError):
            v.original_version

    @pytest.mark.parametrize("content", ["1.2.3 1.2.3.redhat-1", "a b c d e f g", ""])
    def test_wrong_field_count(self, content):
        with pytest.raises(FormatError, match="expected 6 fields"):
            VersionDescriptor.parse(content)


# ---------------------------------------------------------------------------
# REST mirrors
# ---------------------------------------------------------------------------


class TestResponseModels:
    def test_page_of_artifacts(self):
        page = Page[Artifact].model_validate({
            "pageIndex": 0,
            "pageSize": 200,
            "totalPages": 1,
            "totalHits": 1,
            "content": [{"id": "42", "identifier": "g:a:pom:1", "build": {"id": "100"}}],
        })
        assert page.total_pages == 1
        assert page.content[0].build.id == "100"

    def test_artifact_without_build(self):
        artifact = Artifact.model_validate({"id": "42", "identifier": "g:a:pom:1", "importDate": "2024-01-01"})
        assert artifact.build is None
        assert artifact.import_date == "2024-01-01"

    def test_creation_response_without_task(self):
        response = RepositoryCreationResponse.model_validate({"repository": {"id": "7", "internalUrl": "git+ssh://x"}})
        assert response.task_id is None
        assert response.repository.internal_url == "git+ssh://x"

    def test_build_info_accepts_camel_case_maven(self):
        info = BuildInfo.model_validate({
            "name": "sshd",
            "extra": {"typeinfo": {"maven": {"groupId": "g", "artifactId": "a", "version": "1"}}},
        })
        assert str(info.maven) == "g:a:1"

    def test_build_info_without_maven(self):
        info = BuildInfo.model_validate({"name": "sshd", "extra": {}})
        with pytest.raises(FormatError, match="no maven typeinfo"):
            info.maven
