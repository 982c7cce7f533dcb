"""Domain records and pydantic mirrors of the PNC / Brew responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rpm_importer.errors import FormatError

DEFAULT_TYPE = "jar"
POM_TYPE = "pom"
PROJECT_SOURCES_CLASSIFIER = "project-sources"

T = TypeVar("T")


# ── Coordinates ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class BuildCoordinate:
    """A Maven coordinate; ``type`` and ``classifier`` are optional."""

    group_id: str
    artifact_id: str
    version: str
    type: str | None = None
    classifier: str | None = None

    @classmethod
    def parse(cls, identifier: str) -> BuildCoordinate:
        """Parse ``g:a:v``, ``g:a:type:v`` or ``g:a:type:v:classifier``."""
        parts = identifier.strip().split(":")
        if any(not p for p in parts):
            raise FormatError(f"Invalid artifact identifier: {identifier}", raw=identifier)
        if len(parts) == 3:
            return cls(parts[0], parts[1], parts[2])
        if len(parts) == 4:
            return cls(parts[0], parts[1], parts[3], type=parts[2])
        if len(parts) == 5:
            return cls(parts[0], parts[1], parts[3], type=parts[2], classifier=parts[4])
        raise FormatError(f"Invalid artifact identifier: {identifier}", raw=identifier)

    def with_type(self, type_: str) -> BuildCoordinate:
        return BuildCoordinate(self.group_id, self.artifact_id, self.version, type_, self.classifier)

    @property
    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def identifier(self) -> str:
        """groupId:artifactId:type:version[:classifier] -- the PNC identifier shape."""
        if self.type is None:
            return self.gav
        ident = f"{self.group_id}:{self.artifact_id}:{self.type}:{self.version}"
        if self.classifier:
            ident += f":{self.classifier}"
        return ident

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class ArtifactRecord:
    """One artifact produced by a tracked build."""

    identifier: str
    coordinate: BuildCoordinate

    @classmethod
    def from_identifier(cls, identifier: str) -> ArtifactRecord:
        coordinate = BuildCoordinate.parse(identifier)
        return cls(identifier=coordinate.identifier, coordinate=coordinate)

    @property
    def group_id(self) -> str:
        return self.coordinate.group_id

    @property
    def artifact_id(self) -> str:
        return self.coordinate.artifact_id

    @property
    def version(self) -> str:
        return self.coordinate.version

    @property
    def type(self) -> str:
        return self.coordinate.type or DEFAULT_TYPE

    @property
    def classifier(self) -> str:
        return self.coordinate.classifier or ""

    @property
    def file_name(self) -> str:
        """e.g. ``sshd-2.14.0.redhat-00002-project-sources.tar.gz``."""
        name = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            name += f"-{self.classifier}"
        return f"{name}.{self.type}"

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class BuildRecord:
    """An artifact looked up by id, with its originating build (if any).

    ``build_id`` is None when the artifact was imported rather than built.
    """

    id: str
    coordinate: BuildCoordinate
    build_id: str | None = None
    import_date: str | None = None


# ── Marker files ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class VersionDescriptor:
    """The six fields of the version-release-serial marker.

    Format: ``<meadversion> <namedversion> <meadalpha> <meadrel> <serial> <namedversionrel>``
    """

    raw_version: str
    named_version: str
    alpha_tag: str
    release_tag: str
    serial: str
    named_version_release: str
    raw: str = ""

    @classmethod
    def parse(cls, content: str) -> VersionDescriptor:
        raw = content.strip()
        fields = raw.split()
        if len(fields) != 6:
            raise FormatError(
                f"Invalid version-release-serial format; expected 6 fields but found {len(fields)} in {raw!r}",
                raw=raw,
            )
        return cls(*fields, raw=raw)

    @property
    def original_version(self) -> str:
        """namedVersion without its trailing ``.<namedversionrel>``."""
        suffix = "." + self.named_version_release
        if self.named_version.endswith(suffix) and len(self.named_version) > len(suffix):
            return self.named_version[: -len(suffix)]
        raise FormatError(
            f"Invalid version-release-serial format; unable to determine original version from {self.raw}",
            raw=self.raw,
        )


# ── Brew build info ───────────────────────────────────────────────────

class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MavenInfo(_Model):
    group_id: str = Field(validation_alias=AliasChoices("group_id", "groupId"))
    artifact_id: str = Field(validation_alias=AliasChoices("artifact_id", "artifactId"))
    version: str

    def to_coordinate(self) -> BuildCoordinate:
        return BuildCoordinate(self.group_id, self.artifact_id, self.version)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class Typeinfo(_Model):
    maven: MavenInfo | None = None


class BuildExtra(_Model):
    typeinfo: Typeinfo | None = None
    maven: MavenInfo | None = None


class BuildInfo(_Model):
    """Subset of Brew's ``getBuild`` response."""

    id: int | None = None
    name: str = ""
    nvr: str = ""
    extra: BuildExtra | None = None

    @property
    def maven(self) -> MavenInfo:
        """The normalized coordinate block; only valid after validation."""
        if self.extra is None or self.extra.typeinfo is None or self.extra.typeinfo.maven is None:
            raise FormatError(f"Build info for {self.nvr or self.name} has no maven typeinfo")
        return self.extra.typeinfo.maven


# ── PNC API response mirrors ─────────────────────────────────────────

class Page(_Model, Generic[T]):
    page_index: int = Field(default=0, alias="pageIndex")
    page_size: int = Field(default=0, alias="pageSize")
    total_pages: int = Field(default=0, alias="totalPages")
    total_hits: int = Field(default=0, alias="totalHits")
    content: list[T] = []


class ScmRepository(_Model):
    id: str
    internal_url: str = Field(default="", alias="internalUrl")
    external_url: str | None = Field(default=None, alias="externalUrl")
    pre_build_sync_enabled: bool = Field(default=False, alias="preBuildSyncEnabled")


class RepositoryCreationResponse(_Model):
    task_id: int | None = Field(default=None, alias="taskId")
    repository: ScmRepository | None = None


class BuildRef(_Model):
    id: str


class Artifact(_Model):
    id: str
    identifier: str
    build: BuildRef | None = None
    import_date: str | None = Field(default=None, alias="importDate")


class TranslateResponse(_Model):
    external_url: str = Field(default="", alias="externalUrl")
    internal_url: str = Field(alias="internalUrl")
