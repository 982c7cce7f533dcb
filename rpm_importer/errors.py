"""Error taxonomy for an import run.

Every stage raises one of these; only the command line maps them to exit
codes. An existing pom.xml is not an error -- see ``SynthesisResult``.
"""

from __future__ import annotations


class ImporterError(Exception):
    """Base class for all fatal import failures."""

    exit_code = 1


class ConfigError(ImporterError):
    """Missing branch, config file, profile or service section."""

    exit_code = 2


class ServiceError(ImporterError):
    """A REST or CLI collaborator failed (translation, orchestration, brew...)."""

    exit_code = 3


class FormatError(ImporterError):
    """Upstream data could not be parsed.

    ``raw`` keeps the offending value so it can be reported verbatim.
    """

    exit_code = 4

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class GitError(ImporterError):
    """A git command failed (anything other than an empty commit)."""

    exit_code = 5

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr
