"""Sequential import driver: resolve, materialize, read, resolve graph, synthesize, commit."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from rpm_importer import brew, workspace
from rpm_importer.artifacts import ArtifactGraphResolver
from rpm_importer.client import OrchClient, ReqourClient, TokenSupplier
from rpm_importer.committer import CommitResult, commit_and_push
from rpm_importer.config import ImportOptions, ProfileConfig
from rpm_importer.errors import ImporterError
from rpm_importer.git import GitRepository
from rpm_importer.metadata import read_build_metadata
from rpm_importer.scm import ScmResolver, ScmState
from rpm_importer.synthesizer import ManifestSynthesizer, compute_artifact_id, compute_group_id

logger = logging.getLogger("rpm_importer.pipeline")


@dataclass
class ImportResult:
    """What a run did, for reporting by the caller."""

    repository: Path | None = None
    internal_url: str = ""
    scm_state: ScmState = ScmState.UNRESOLVED
    upstream: str = ""
    group_id: str = ""
    artifact_id: str = ""
    dependency_count: int = 0
    written: bool = False
    committed: bool = False
    pushed: bool = False
    commit: str | None = None
    warnings: list[str] = field(default_factory=list)


class ImportPipeline:
    """Runs the stages in order; each stage sees only the previous stage's output.

    Collaborators are injectable so tests can stub the network and brew.
    """

    def __init__(
        self,
        reqour: ReqourClient,
        orch: OrchClient,
        *,
        synthesizer: ManifestSynthesizer | None = None,
        build_info_fetcher: Callable[[str], dict[str, Any]] = brew.get_build_info,
        branch_checker: Callable[[str, str], bool] | None = None,
        cancel: threading.Event | None = None,
    ):
        self.reqour = reqour
        self.orch = orch
        self.synthesizer = synthesizer or ManifestSynthesizer()
        self.build_info_fetcher = build_info_fetcher
        resolver_kwargs: dict[str, Any] = {"cancel": cancel}
        if branch_checker is not None:
            resolver_kwargs["branch_checker"] = branch_checker
        self.resolver = ScmResolver(reqour, orch, **resolver_kwargs)
        self.graph = ArtifactGraphResolver(orch)

    @classmethod
    def from_profile(cls, profile: ProfileConfig, **kwargs) -> ImportPipeline:
        tokens = TokenSupplier(profile)
        return cls(
            ReqourClient(profile.reqour_url, token_supplier=tokens),
            OrchClient(profile.pnc_url, token_supplier=tokens),
            **kwargs,
        )

    def close(self) -> None:
        self.reqour.close()
        self.orch.close()

    def run(self, options: ImportOptions) -> ImportResult:
        """Import *options.url* at *options.branch* and commit the generated pom.xml.

        Raises:
            ImporterError: Any fatal stage failure. A pom.xml that already
                exists is not a failure; ``written`` is False in that case.
        """
        options.validate()
        result = ImportResult()

        resolution = self.resolver.resolve(options, check_mirror=options.repository is None)
        result.internal_url = resolution.internal_url
        result.scm_state = resolution.state
        result.warnings.extend(resolution.warnings)

        repo = workspace.materialize(resolution.internal_url, options.branch, options.repository)
        result.repository = repo.root
        try:
            self._generate(repo, options, result)
        except ImporterError:
            if options.repository is None:
                logger.error("Import failed; working copy left at %s", repo.root)
            raise
        return result

    def _generate(self, repo: GitRepository, options: ImportOptions, result: ImportResult) -> None:
        metadata = read_build_metadata(repo.root, build_info_fetcher=self.build_info_fetcher)
        result.upstream = metadata.coordinate.gav
        result.group_id = compute_group_id(metadata)
        result.artifact_id = compute_artifact_id(metadata, options.branch)

        dependencies = self.graph.resolve(metadata.coordinate)
        result.dependency_count = len(dependencies)
        if not dependencies:
            result.warnings.append(f"No built artifacts found for {metadata.coordinate.gav}")

        synthesis = self.synthesizer.synthesize(
            repo.root,
            metadata,
            dependencies,
            branch=options.branch,
            overwrite=options.overwrite,
            latest_plugin_version=options.latest_plugin_version,
        )
        result.warnings.extend(synthesis.warnings)
        if not synthesis.written:
            return
        result.written = True

        committed: CommitResult = commit_and_push(repo, push=options.push)
        result.committed = committed.committed
        result.commit = committed.commit
        result.pushed = committed.pushed


def run_import(profile: ProfileConfig, options: ImportOptions, **kwargs) -> ImportResult:
    """Build the clients for *profile* and run one import."""
    pipeline = ImportPipeline.from_profile(profile, **kwargs)
    try:
        return pipeline.run(options)
    finally:
        pipeline.close()
