"""Python wrapper around the Brew (koji) CLI for legacy build information.

The last-mead-build marker holds an NVR that cannot be turned into a GAV
locally; Brew's ``getBuild`` call returns the build-info blob carrying it.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from rpm_importer.errors import ServiceError

logger = logging.getLogger("rpm_importer.brew")

BREW_COMMAND = "brew"


def _run_brew(*args: str, command: str = BREW_COMMAND) -> Any:
    """Run a brew CLI call and return its parsed JSON output.

    Raises:
        ServiceError: If brew is missing, exits non-zero, or prints invalid JSON.
    """
    cmd = [command, *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError:
        raise ServiceError(f"Brew CLI ({command}) not found on PATH") from None
    except subprocess.CalledProcessError as e:
        raise ServiceError(
            f"{command} {' '.join(args)} failed (exit {e.returncode}): {(e.stderr or '').strip()[:500]}"
        ) from e

    stdout = result.stdout.strip()
    if not stdout or stdout == "null":
        raise ServiceError(f"{command} returned no build information for {args[-1]}")
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ServiceError(f"Failed to parse {command} JSON output: {e}\nOutput: {stdout[:500]}") from e


def get_build_info(nvr: str, *, command: str = BREW_COMMAND) -> dict[str, Any]:
    """Return the raw ``getBuild`` record for *nvr*."""
    data = _run_brew("call", "--json-output", "getBuild", nvr, command=command)
    if not isinstance(data, dict):
        raise ServiceError(f"Unexpected getBuild response for {nvr}: {str(data)[:200]}")
    return data
