"""SCM resolution -- external URL to a ready internal mirror."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from rpm_importer.client.orch import OrchClient
from rpm_importer.client.reqour import ReqourClient
from rpm_importer.config import ImportOptions
from rpm_importer.errors import ServiceError
from rpm_importer.git import remote_branch_exists
from rpm_importer.retry import poll_until

logger = logging.getLogger("rpm_importer.scm")


class ScmState(str, Enum):
    UNRESOLVED = "UNRESOLVED"
    TRANSLATED = "TRANSLATED"
    MIRROR_EXISTS = "MIRROR_EXISTS"
    SYNC_REQUESTED = "SYNC_REQUESTED"
    READY = "READY"
    BEST_EFFORT = "BEST_EFFORT"


@dataclass
class ScmReference:
    external_url: str
    branch: str
    internal_url: str | None = None


@dataclass
class ScmResolution:
    """Outcome of :meth:`ScmResolver.resolve`.

    ``BEST_EFFORT`` means the sync was requested but the branch never showed
    up on the mirror within the polling budget; the run carries on anyway.
    """

    reference: ScmReference
    state: ScmState
    states: list[ScmState] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def internal_url(self) -> str:
        return self.reference.internal_url or ""


class ScmResolver:
    """Translates the external URL and makes sure PNC has an internal mirror."""

    def __init__(
        self,
        reqour: ReqourClient,
        orch: OrchClient,
        *,
        branch_checker: Callable[[str, str], bool] = remote_branch_exists,
        cancel: threading.Event | None = None,
    ):
        self.reqour = reqour
        self.orch = orch
        self.branch_checker = branch_checker
        self.cancel = cancel

    def resolve(self, options: ImportOptions, *, check_mirror: bool = True) -> ScmResolution:
        """Run the resolution state machine.

        With ``check_mirror=False`` (a local working copy was supplied) only
        the URL translation is performed.

        Raises:
            ServiceError: If translation or mirror listing fails, or if the
                mirror is absent and syncing was skipped.
        """
        reference = ScmReference(external_url=options.url, branch=options.branch)
        resolution = ScmResolution(reference=reference, state=ScmState.UNRESOLVED)

        reference.internal_url = self.reqour.external_to_internal(options.url)
        self._enter(resolution, ScmState.TRANSLATED)
        logger.info("For external URL %s retrieved internal %s", options.url, reference.internal_url)

        if not check_mirror:
            self._enter(resolution, ScmState.READY)
            return resolution

        # Search by the internal URL: a repository that was never set up to
        # sync does not list the external one.
        existing = self.orch.list_repositories(reference.internal_url)
        logger.info("Retrieved from pnc repository information: %s", existing[0] if existing else None)

        if existing:
            self._enter(resolution, ScmState.MIRROR_EXISTS)
            self._enter(resolution, ScmState.READY)
            return resolution

        if options.skip_sync:
            logger.error("Skipping repository creation but %s is not available internally", reference.internal_url)
            raise ServiceError(f"Internal repository {reference.internal_url} does not exist")

        response = self.orch.create_and_sync(options.url)
        self._enter(resolution, ScmState.SYNC_REQUESTED)
        if response.task_id is None:
            logger.info("Repository %s created without a sync task", reference.internal_url)
            self._enter(resolution, ScmState.READY)
            return resolution

        logger.info("Looping until sync is complete (task %s)", response.task_id)
        outcome = poll_until(
            lambda: self.branch_checker(reference.internal_url, options.branch),
            attempts=options.sync_attempts,
            interval=options.sync_interval,
            timeout=options.sync_timeout,
            cancel=self.cancel,
            description=f"branch {options.branch} on {reference.internal_url}",
        )
        if outcome.ready:
            self._enter(resolution, ScmState.READY)
        else:
            warning = (
                f"Branch {options.branch} not found on {reference.internal_url} after "
                f"{outcome.attempts} check(s); continuing with a possibly incomplete mirror"
            )
            logger.warning(warning)
            resolution.warnings.append(warning)
            self._enter(resolution, ScmState.BEST_EFFORT)
        return resolution

    @staticmethod
    def _enter(resolution: ScmResolution, state: ScmState) -> None:
        resolution.states.append(state)
        resolution.state = state
        logger.debug("SCM state -> %s", state.value)
