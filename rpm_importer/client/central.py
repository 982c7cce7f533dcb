"""Maven Central lookup for the latest rpm-builder-maven-plugin release."""
from __future__ import annotations

import logging
import re

import httpx

from rpm_importer.errors import ServiceError

logger = logging.getLogger("rpm_importer.client.central")

RPM_BUILDER_PLUGIN_METADATA_URL = (
    "https://repo1.maven.org/maven2/org/jboss/pnc/rpm-builder-maven-plugin/maven-metadata.xml"
)
_LATEST_VERSION_PATTERN = re.compile(r"<latest>([^<]+)</latest>")
_RELEASE_VERSION_PATTERN = re.compile(r"<release>([^<]+)</release>")


def _first_match(pattern: re.Pattern, body: str) -> str | None:
    match = pattern.search(body)
    return match.group(1).strip() if match else None


def latest_rpm_builder_plugin_version(
    url: str = RPM_BUILDER_PLUGIN_METADATA_URL,
    timeout: float = 10.0,
) -> str:
    """Return ``<latest>`` (falling back to ``<release>``) from the plugin metadata.

    Raises:
        ServiceError: On transport failure, a non-200 response, or metadata
            without either element.
    """
    try:
        resp = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        raise ServiceError(f"Failed to fetch maven-metadata.xml from {url}: {e}") from e
    if resp.status_code != 200:
        raise ServiceError(f"Failed to fetch maven-metadata.xml: HTTP {resp.status_code} {url}")

    version = _first_match(_LATEST_VERSION_PATTERN, resp.text) or _first_match(_RELEASE_VERSION_PATTERN, resp.text)
    if version is None:
        raise ServiceError(f"Could not parse latest or release version from maven-metadata.xml: {url}")
    logger.info("Latest rpm-builder-maven-plugin version is %s", version)
    return version
