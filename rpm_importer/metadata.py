"""Build metadata from the dist-git marker files and Brew.

Marker files in the working-copy root:

* ``mead-pkg-name`` -- ``<pkg> <optionalTag>``
* ``version-release-serial`` --
  ``<meadversion> <namedversion> <meadalpha> <meadrel> <serial> <namedversionrel>``
* ``last-mead-build`` -- an NVR. It cannot be reversed into a GAV locally, but
  Brew's build info for it carries the Maven coordinate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from rpm_importer import brew
from rpm_importer.errors import FormatError
from rpm_importer.models import BuildCoordinate, BuildInfo, Typeinfo, VersionDescriptor

logger = logging.getLogger("rpm_importer.metadata")

MEAD_PKG_NAME = "mead-pkg-name"
VERSION_RELEASE_SERIAL = "version-release-serial"
LAST_MEAD_BUILD = "last-mead-build"


def _read_marker(path: Path, name: str) -> str:
    marker = path / name
    try:
        return marker.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise FormatError(f"Marker file {name} not found in {path}") from None


def parse_mead_pkg_name(path: Path) -> str:
    """First field of the package-name marker."""
    found = _read_marker(path, MEAD_PKG_NAME)
    if not found:
        raise FormatError(f"Marker file {MEAD_PKG_NAME} is empty", raw=found)
    return found.split()[0]


def parse_version_release_serial(path: Path) -> VersionDescriptor:
    return VersionDescriptor.parse(_read_marker(path, VERSION_RELEASE_SERIAL))


def read_last_mead_build(path: Path) -> str:
    found = _read_marker(path, LAST_MEAD_BUILD)
    if not found:
        raise FormatError(f"Marker file {LAST_MEAD_BUILD} is empty", raw=found)
    return found


def validate_build_info(build_info: BuildInfo) -> bool:
    """Check that *build_info* carries a Maven coordinate.

    If only the legacy ``extra.maven`` block is present it is copied to
    ``extra.typeinfo.maven`` so later code reads a single shape.

    Returns:
        True if a Maven block was found, else False.
    """
    extra = build_info.extra
    if extra is None:
        return False
    if extra.typeinfo is not None and extra.typeinfo.maven is not None:
        return True
    if extra.maven is not None:
        logger.warning("Legacy typeinfo detected for %s", build_info.name or build_info.nvr)
        extra.typeinfo = Typeinfo(maven=extra.maven.model_copy())
        return True
    return False


def parse_build_info(data: dict[str, Any]) -> BuildInfo:
    """Validate and normalize a raw build-info blob.

    Raises:
        FormatError: If the blob is malformed or has no Maven coordinate.
    """
    try:
        build_info = BuildInfo.model_validate(data)
    except ValueError as e:
        raise FormatError(f"Invalid build info: {e}", raw=str(data)[:500]) from e
    if not validate_build_info(build_info):
        raise FormatError(
            f"Build info for {build_info.nvr or build_info.name} has no Maven coordinate",
            raw=str(data)[:500],
        )
    return build_info


@dataclass(frozen=True)
class BuildMetadata:
    """Everything recovered about the wrapped build."""

    package_name: str
    version: VersionDescriptor
    last_mead_build: str
    build_info: BuildInfo

    @property
    def coordinate(self) -> BuildCoordinate:
        return self.build_info.maven.to_coordinate()

    @property
    def original_version(self) -> str:
        return self.version.original_version


def read_build_metadata(
    path: Path,
    build_info_fetcher: Callable[[str], dict[str, Any]] = brew.get_build_info,
) -> BuildMetadata:
    """Read the marker files in *path* and resolve the last-mead-build via Brew."""
    nvr = read_last_mead_build(path)
    build_info = parse_build_info(build_info_fetcher(nvr))
    logger.info("Found last-mead-build %s with GAV %s", nvr, build_info.maven)

    version = parse_version_release_serial(path)
    # Raise the format error here rather than half way through synthesis.
    original = version.original_version
    logger.info("Found version: %s (named version %s)", original, version.named_version)

    return BuildMetadata(
        package_name=parse_mead_pkg_name(path),
        version=version,
        last_mead_build=nvr,
        build_info=build_info,
    )
