"""pom.xml synthesis from the bundled template."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rpm_importer.client.central import latest_rpm_builder_plugin_version
from rpm_importer.errors import FormatError
from rpm_importer.metadata import BuildMetadata
from rpm_importer.models import DEFAULT_TYPE, PROJECT_SOURCES_CLASSIFIER, ArtifactRecord
from rpm_importer.pom.editor import (
    ARTIFACT_ID,
    BUILD,
    CLASSIFIER,
    DEPENDENCIES,
    DEPENDENCY_MANAGEMENT,
    GROUP_ID,
    NAME,
    PLUGINS,
    PROPERTIES,
    TYPE,
    VERSION,
    PomEditor,
)

logger = logging.getLogger("rpm_importer.synthesizer")

TEMPLATE_PATH = Path(__file__).parent / "templates" / "pom-template.xml"
POM_FILE = "pom.xml"

SPEC_TOKEN = "template.spec"
SOURCE_TOKEN = "Source100:"
GROUP_NAMESPACE = "org.jboss.pnc.rpm"
MANIFEST_VERSION = "1.0.0"
WRAPPED_BUILD_PROPERTY = "wrappedBuild"
WRAPPED_BUILD_REF = "${" + WRAPPED_BUILD_PROPERTY + "}"
RPM_BUILDER_PROPERTY = "rpmBuilderPluginVersion"
DEPENDENCY_PLUGIN = "maven-dependency-plugin"
ARTIFACT_ITEMS_PATH = "executions/execution/configuration/artifactItems"


@dataclass
class SynthesisResult:
    """``written`` is False when an existing pom.xml was left alone."""

    path: Path
    written: bool
    content: str | None = None
    warnings: list[str] = field(default_factory=list)


def read_template(path: Path = TEMPLATE_PATH) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FormatError(f"Template not found: {path}") from None


def find_spec_files(repository: Path) -> list[Path]:
    """``*.spec`` files directly in *repository*, sorted by name."""
    return sorted(p for p in repository.glob("*.spec") if p.is_file())


def find_project_sources(dependencies: list[ArtifactRecord]) -> ArtifactRecord | None:
    return next((d for d in dependencies if d.classifier == PROJECT_SOURCES_CLASSIFIER), None)


def substitute_markers(
    source: str,
    repository: Path,
    dependencies: list[ArtifactRecord],
    warnings: list[str] | None = None,
) -> str:
    """Replace the literal spec-file and Source100 tokens.

    Plain string replacement: the tokens carry no XML structure.
    """
    warnings = warnings if warnings is not None else []

    spec_files = find_spec_files(repository)
    if not spec_files:
        message = f"No spec file found in {repository}; leaving {SPEC_TOKEN} marker"
        logger.warning(message)
        warnings.append(message)
    else:
        if len(spec_files) > 1:
            message = f"Multiple spec files found: {[p.name for p in spec_files]}; using {spec_files[0].name}"
            logger.warning(message)
            warnings.append(message)
        logger.info("Replacing %s marker with: %s", SPEC_TOKEN, spec_files[0].name)
        source = source.replace(SPEC_TOKEN, spec_files[0].name)

    project_sources = find_project_sources(dependencies)
    if project_sources is not None:
        injection = project_sources.file_name
        logger.info("Injecting under Source100 marker project sources: %s", injection)
        source = source.replace(SOURCE_TOKEN, f"{SOURCE_TOKEN} {injection}")
    else:
        message = (
            f"Unable to find artifact with {PROJECT_SOURCES_CLASSIFIER} classifier "
            f"to substitute {SOURCE_TOKEN} marker in spec file."
        )
        logger.warning(message)
        warnings.append(message)
    return source


def compute_group_id(metadata: BuildMetadata) -> str:
    return f"{GROUP_NAMESPACE}.{metadata.coordinate.group_id}"


def compute_artifact_id(metadata: BuildMetadata, branch: str) -> str:
    # One artifactId per branch.
    return f"{metadata.coordinate.artifact_id}-{branch}"


def edit_pom(
    source: str,
    metadata: BuildMetadata,
    dependencies: list[ArtifactRecord],
    *,
    branch: str,
    plugin_version: str | None = None,
) -> str:
    """Apply the structured edits to the substituted template text."""
    editor = PomEditor.parse(source)
    root = editor.root()

    group_id = compute_group_id(metadata)
    artifact_id = compute_artifact_id(metadata, branch)
    logger.info(
        "Setting groupId : artifactId to comprise of scoped groupId and branch name: %s:%s",
        group_id, artifact_id,
    )
    editor.set_text(root, NAME, metadata.package_name)
    editor.set_text(root, GROUP_ID, group_id)
    editor.set_text(root, ARTIFACT_ID, artifact_id)
    editor.set_text(root, VERSION, MANIFEST_VERSION)

    properties = editor.find_child(root, PROPERTIES)
    editor.set_text(properties, WRAPPED_BUILD_PROPERTY, metadata.original_version)
    if plugin_version:
        editor.set_text(properties, RPM_BUILDER_PROPERTY, plugin_version)

    upstream = metadata.coordinate
    managed = editor.find_path(f"{DEPENDENCY_MANAGEMENT}/{DEPENDENCIES}")
    editor.add_dependency(managed, upstream.group_id, upstream.artifact_id, WRAPPED_BUILD_REF)

    plugins = editor.find_path(f"{BUILD}/{PLUGINS}")
    # The template has exactly one plugin with this artifactId.
    plugin = editor.find_plugin(plugins, DEPENDENCY_PLUGIN)
    artifact_items = editor.find_path(ARTIFACT_ITEMS_PATH, plugin)

    for dependency in dependencies:
        item = editor.insert_element(artifact_items, "artifactItem")
        editor.insert_element(item, GROUP_ID, dependency.group_id)
        editor.insert_element(item, ARTIFACT_ID, dependency.artifact_id)
        editor.insert_element(item, VERSION, WRAPPED_BUILD_REF)
        if dependency.classifier:
            editor.insert_element(item, CLASSIFIER, dependency.classifier)
        if dependency.coordinate.type and dependency.coordinate.type != DEFAULT_TYPE:
            editor.insert_element(item, TYPE, dependency.coordinate.type)

    return editor.to_xml()


class ManifestSynthesizer:
    """Generates pom.xml in the working copy."""

    def __init__(
        self,
        template_path: Path = TEMPLATE_PATH,
        plugin_version_lookup: Callable[[], str] = latest_rpm_builder_plugin_version,
    ):
        self.template_path = template_path
        self.plugin_version_lookup = plugin_version_lookup

    def synthesize(
        self,
        repository: Path,
        metadata: BuildMetadata,
        dependencies: list[ArtifactRecord],
        *,
        branch: str,
        overwrite: bool = False,
        latest_plugin_version: bool = False,
    ) -> SynthesisResult:
        """Render the template for *metadata* and write ``pom.xml``.

        An existing pom.xml is only replaced when *overwrite* is set;
        otherwise nothing is written and ``written`` is False.
        """
        target = repository / POM_FILE
        warnings: list[str] = []

        source = substitute_markers(read_template(self.template_path), repository, dependencies, warnings)

        if target.exists() and not overwrite:
            logger.error("%s already exists and not overwriting", POM_FILE)
            return SynthesisResult(path=target, written=False, warnings=warnings)

        plugin_version = self.plugin_version_lookup() if latest_plugin_version else None
        content = edit_pom(source, metadata, dependencies, branch=branch, plugin_version=plugin_version)

        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Wrote %s with %d artifact item(s)", target, len(dependencies))
        return SynthesisResult(path=target, written=True, content=content, warnings=warnings)
