"""
Retry policy for upstream fetches.

Only transient failures are retried: transport errors and 429 responses.
Not-found/forbidden responses and parse failures fail immediately.
"""

from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)

from ..collector.errors import NetworkFailure, RateLimited
from .config import MAX_RETRY_ATTEMPTS, RETRY_BACKOFF_MULTIPLIER
from .logger import logger

T = TypeVar('T')

RETRYABLE_ERRORS = (NetworkFailure, RateLimited)


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Retrying upstream fetch", extra={
        "attempt": retry_state.attempt_number,
        "error_type": type(exc).__name__ if exc else None,
        "error_message": str(exc) if exc else None,
    })


def build_retrying(max_attempts: int = MAX_RETRY_ATTEMPTS,
                   backoff_multiplier: float = RETRY_BACKOFF_MULTIPLIER,
                   wait_min: float = 2,
                   wait_max: float = 30) -> Retrying:
    """
    Build a tenacity ``Retrying`` controller for upstream fetches.

    A ``backoff_multiplier`` of 0 disables waiting between attempts.
    The last exception is re-raised once attempts are exhausted.
    """
    wait = (wait_exponential(multiplier=backoff_multiplier, min=wait_min, max=wait_max)
            if backoff_multiplier > 0 else wait_none())
    return Retrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait,
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=_log_retry,
        reraise=True,
    )


def call_with_retry(retrying: Retrying, fn: Callable[..., T], *args, **kwargs) -> T:
    """Invoke ``fn`` under the given retry policy."""
    return retrying(fn, *args, **kwargs)
