"""Thin wrapper over the git CLI: clone, checkout, stage, commit, push, ls-remote."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rpm_importer.errors import GitError

logger = logging.getLogger("rpm_importer.git")


class EmptyCommitError(GitError):
    """Nothing is staged; the commit was not created."""


def _run_git(*args: str, cwd: Path | None = None, check: bool = True) -> subprocess.CompletedProcess:
    """Run a git command, mapping failures to :class:`GitError`."""
    cmd = ["git", *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        raise GitError("git is not found on PATH") from None
    if check and result.returncode != 0:
        raise GitError(
            f"git {args[0]} failed (exit {result.returncode}): {result.stderr.strip()[:500]}",
            stderr=result.stderr,
        )
    return result


def summarize_progress(output: str) -> str:
    """Collapse git progress output to one final line per phase.

    Progress updates are separated by carriage returns; only the last one
    of each line is kept, with leading whitespace stripped.
    """
    lines = []
    for line in output.split("\n"):
        final = line.split("\r")[-1].strip()
        if final:
            lines.append(final)
    return "\n".join(lines)


def remote_branch_exists(url: str, branch: str) -> bool:
    """``git ls-remote --exit-code --heads <url> <branch>`` without cloning."""
    result = _run_git("ls-remote", "--exit-code", "--heads", url, branch, check=False)
    return result.returncode == 0


def clone(url: str, branch: str, dest: Path) -> GitRepository:
    """Clone *url* into *dest* with *branch* checked out."""
    result = _run_git("clone", "--progress", "--branch", branch, url, str(dest))
    logger.info("Clone summary:\n%s", summarize_progress(result.stderr))
    return GitRepository(dest)


class GitRepository:
    """A local working copy."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return _run_git(*args, cwd=self.root, check=check)

    def init(self) -> None:
        """``git init`` -- a no-op on an existing repository."""
        self._run("init", "--quiet")

    def checkout(self, branch: str) -> None:
        self._run("checkout", branch)

    def add(self, *paths: str) -> None:
        self._run("add", "--", *paths)

    def has_staged_changes(self) -> bool:
        result = self._run("diff", "--cached", "--quiet", check=False)
        if result.returncode not in (0, 1):
            raise GitError(f"git diff failed (exit {result.returncode}): {result.stderr.strip()}", stderr=result.stderr)
        return result.returncode == 1

    def commit(self, message: str, *, no_verify: bool = True, allow_empty: bool = False) -> str:
        """Commit the index and return the new commit hash.

        Raises:
            EmptyCommitError: If nothing is staged and *allow_empty* is False.
        """
        if not allow_empty and not self.has_staged_changes():
            raise EmptyCommitError("No changes staged for commit")
        args = ["commit", "--quiet", "-m", message]
        if no_verify:
            args.append("--no-verify")
        if allow_empty:
            args.append("--allow-empty")
        self._run(*args)
        return self.head()

    def head(self) -> str:
        return self._run("rev-parse", "HEAD").stdout.strip()

    def push(self) -> str:
        """Push the current branch to its upstream; returns the progress summary."""
        result = self._run("push", "--progress")
        return summarize_progress(result.stderr)
