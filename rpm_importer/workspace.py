"""Repository materialization -- a local working copy at the target branch."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from rpm_importer.errors import GitError
from rpm_importer import git
from rpm_importer.git import GitRepository

logger = logging.getLogger("rpm_importer.workspace")

CLONE_PREFIX = "clone-"


def create_temp_dir(prefix: str = CLONE_PREFIX, activity: str = "cloning") -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=prefix))
    except OSError as e:
        raise GitError(f"Cannot create temporary directory for {activity}: {e}") from e


def clone_repository(url: str, branch: str) -> GitRepository:
    """Clone *url* at *branch* into a fresh temporary directory.

    The directory is removed again if the clone fails; after a successful
    clone it is left for the caller.
    """
    path = create_temp_dir()
    logger.info("Using %s for repository", path)
    try:
        return git.clone(url, branch, path)
    except GitError:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed %s after failed clone", path)
        raise


def open_repository(path: Path, branch: str) -> GitRepository:
    """Initialize git metadata in place (if needed) and check out *branch*."""
    logger.info("Using existing repository %s", path)
    if not path.is_dir():
        raise GitError(f"Repository path {path} is not a directory")
    repo = GitRepository(path)
    repo.init()
    repo.checkout(branch)
    return repo


def materialize(internal_url: str, branch: str, repository: Path | None = None) -> GitRepository:
    """Return the working copy every later stage operates on."""
    if repository is not None:
        return open_repository(Path(repository), branch)
    return clone_repository(internal_url, branch)
