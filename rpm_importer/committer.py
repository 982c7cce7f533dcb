"""Commit (and optionally push) the generated pom.xml."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rpm_importer.git import EmptyCommitError, GitRepository
from rpm_importer.synthesizer import POM_FILE

logger = logging.getLogger("rpm_importer.committer")

COMMIT_MESSAGE = "RPM-Importer - POM Generation"


@dataclass
class CommitResult:
    committed: bool
    commit: str | None = None
    pushed: bool = False
    push_summary: str = ""


def commit_and_push(repo: GitRepository, push: bool = False, file_name: str = POM_FILE) -> CommitResult:
    """Stage *file_name*, commit without hooks and push if asked.

    Nothing to commit is a successful no-op, so re-running against an
    unchanged build adds no history.

    Raises:
        GitError: For any other git failure.
    """
    repo.add(file_name)
    try:
        commit = repo.commit(COMMIT_MESSAGE, no_verify=True, allow_empty=False)
    except EmptyCommitError:
        logger.info("Nothing to commit")
        return CommitResult(committed=False)
    logger.info("Added and committed %s (%s)", file_name, commit)

    result = CommitResult(committed=True, commit=commit)
    if push:
        result.push_summary = repo.push()
        result.pushed = True
        logger.info("Push summary:\n%s", result.push_summary)
    return result
