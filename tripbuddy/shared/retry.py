"""
Bounded retry combinator built on tenacity.

A RetryPolicy bundles the maximum number of attempts, the backoff
function, and a predicate deciding which errors may be retried. The
client send loop drives it through ``async_retrying()``; the server-side
fallback graph asks ``should_retry()`` between model candidates.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Callable

import openai
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
    wait_none,
)


# Messages that indicate an infrastructure condition rather than bad output
TRANSIENT_ERROR_PATTERN = re.compile(r"timeout|timed out|abort|rate limit", re.IGNORECASE)


def is_transient_error(error: BaseException) -> bool:
    """
    Check whether an error is a timeout, abort, or rate-limit condition.

    Args:
        error: The raised exception

    Returns:
        True if retrying another model in the same request cycle is pointless
    """
    if isinstance(error, (openai.APITimeoutError, openai.RateLimitError)):
        return True
    if isinstance(error, asyncio.TimeoutError):
        return True
    return bool(TRANSIENT_ERROR_PATTERN.search(str(error)))


def is_auth_error(error: BaseException) -> bool:
    """Check whether an error is a 401/403 from the model gateway."""
    return isinstance(
        error, (openai.AuthenticationError, openai.PermissionDeniedError)
    )


def _always(error: BaseException) -> bool:
    return True


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry configuration shared by the client and server loops.

    Attributes:
        max_attempts: Upper bound on attempts (including the first)
        is_retryable: Predicate; False stops the loop and re-raises
        initial_wait: Base backoff in seconds (0 disables waiting)
        max_wait: Cap on a single backoff, in seconds
        jitter: Upper bound of the uniform random jitter added per wait
    """

    max_attempts: int
    is_retryable: Callable[[BaseException], bool] = _always
    initial_wait: float = 0.0
    max_wait: float = 10.0
    jitter: float = 0.0

    def should_retry(self, error: BaseException, attempts_made: int) -> bool:
        """
        Decide whether another attempt is allowed after a failure.

        Args:
            error: The error from the attempt that just failed
            attempts_made: Number of attempts already made

        Returns:
            True if a further attempt should be made
        """
        if attempts_made >= self.max_attempts:
            return False
        return self.is_retryable(error)

    def _wait(self):
        if self.initial_wait <= 0 and self.jitter <= 0:
            return wait_none()
        return wait_exponential_jitter(
            initial=self.initial_wait,
            max=self.max_wait,
            exp_base=2,
            jitter=self.jitter,
        )

    def async_retrying(self) -> AsyncRetrying:
        """Asyncio tenacity controller for this policy."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=retry_if_exception(self.is_retryable),
            reraise=True,
        )
