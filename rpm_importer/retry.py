"""Bounded polling with a monotonic deadline and a cancellation signal."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger("rpm_importer.retry")

DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL = 5.0  # seconds


@dataclass
class PollOutcome:
    """Result of :func:`poll_until`."""

    ready: bool
    attempts: int
    elapsed: float
    cancelled: bool = False
    timed_out: bool = False


def poll_until(
    check: Callable[[], bool],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    description: str = "condition",
) -> PollOutcome:
    """Wait *interval* seconds, then call *check*; repeat until it returns True.

    The loop stops after *attempts* checks or as soon as *cancel* is set.
    When *timeout* is given it also stops once that many seconds have passed
    on the monotonic clock; without it every wait is a full *interval*,
    however long *check* takes. The wait itself is interruptible through
    *cancel*. Exceptions raised by *check* propagate.
    """
    cancel = cancel or threading.Event()
    start = time.monotonic()
    deadline = start + timeout if timeout is not None else None

    made = 0
    while made < attempts:
        wait = interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning("Gave up waiting for %s after %.1fs (%d checks)", description, timeout, made)
                return PollOutcome(False, made, time.monotonic() - start, timed_out=True)
            wait = min(interval, remaining)
        if cancel.wait(wait):
            logger.warning("Polling for %s cancelled after %d checks", description, made)
            return PollOutcome(False, made, time.monotonic() - start, cancelled=True)
        made += 1
        if check():
            logger.info("%s ready after %d check(s)", description, made)
            return PollOutcome(True, made, time.monotonic() - start)
        logger.debug("Check %d/%d for %s not ready", made, attempts, description)

    logger.warning("%s not ready after %d checks", description, made)
    return PollOutcome(False, made, time.monotonic() - start)
