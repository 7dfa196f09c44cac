"""
Bounded retry with a configurable backoff schedule.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Tuple, Type, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Outcome of a retried call."""

    value: Optional[T]
    attempts: int
    exhausted: bool
    error: Optional[BaseException] = None


def linear_backoff(step: float) -> Callable[[int], float]:
    """Delay before attempt ``n`` (1-based) is ``(n - 1) * step``."""

    def backoff(attempt_number: int) -> float:
        return (attempt_number - 1) * step

    return backoff


def attempt(
    fn: Callable[[], T],
    max_attempts: int,
    backoff: Callable[[int], float],
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    log: Optional[logging.Logger] = None,
) -> RetryResult[T]:
    """Call ``fn`` until it succeeds or ``max_attempts`` calls have failed.

    Exceptions not listed in ``retry_on`` propagate immediately.
    """
    log = log or logger
    last_error: Optional[BaseException] = None
    for attempt_number in range(1, max_attempts + 1):
        delay = backoff(attempt_number)
        if delay > 0:
            log.debug("Waiting %.1fs before attempt %d", delay, attempt_number)
            sleep(delay)
        try:
            return RetryResult(value=fn(), attempts=attempt_number, exhausted=False)
        except retry_on as e:
            last_error = e
            log.warning("Attempt %d/%d failed: %s", attempt_number, max_attempts, e)
    return RetryResult(value=None, attempts=max_attempts, exhausted=True, error=last_error)
