"""
Retries for crew API requests.

Only transient failures are repeated: rate limiting, gateway and server
errors, dropped connections and timeouts. Waits grow exponentially from
``base_delay`` up to ``max_delay`` with random jitter so that parallel
report requests do not hammer the API in lockstep.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryExhaustedException(Exception):
    """Raised when a transient failure outlasts every retry."""

    def __init__(self, message: str, last_exception: Optional[Exception] = None):
        self.last_exception = last_exception
        super().__init__(message)


def is_transient_error(exception: Exception) -> bool:
    """Return True for failures worth repeating.

    Any 4xx other than 429, and any non-transport error, is returned to
    the caller on the first attempt.
    """
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        return response is not None and response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(
        exception, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
    )


@dataclass
class RetryStats:
    """Counters across every call made through one handler."""

    calls: int = 0
    retries: int = 0
    failures: int = 0


class RetryHandler:
    """
    Runs a callable, retrying transient failures with backoff and jitter.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        base_delay: Wait before the first retry, in seconds
        max_delay: Upper bound on any single wait
        jitter_factor: Relative random spread applied to each wait
        retry_condition: Decides whether an error is retried
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        jitter_factor: float = 0.1,
        retry_condition: Optional[Callable[[Exception], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter_factor = jitter_factor
        self.retry_condition = retry_condition or is_transient_error
        self._sleep = sleep
        self._stats = RetryStats()
        self._lock = threading.Lock()

    def backoff_delay(self, retry_number: int) -> float:
        """Seconds to wait before retry ``retry_number`` (0-based)."""
        delay = min(self.base_delay * 2**retry_number, self.max_delay)
        jitter = random.uniform(-self.jitter_factor, self.jitter_factor) * delay
        return max(0.0, delay + jitter)

    def call(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Call ``func`` until it succeeds, fails permanently or runs out of retries.

        Returns:
            Whatever ``func`` returns

        Raises:
            RetryExhaustedException: If the last allowed attempt failed transiently
            Exception: The original error when it is not retryable
        """
        name = getattr(func, "__name__", repr(func))
        retries = 0
        while True:
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if not self.retry_condition(e):
                    self._record(retries, failed=False)
                    raise
                if retries >= self.max_retries:
                    logger.warning(f"Giving up on {name} after {retries} retries: {e}")
                    self._record(retries, failed=True)
                    raise RetryExhaustedException(
                        f"Max retries ({self.max_retries}) exceeded. "
                        f"Last error: {type(e).__name__}: {e}",
                        last_exception=e,
                    ) from e
                delay = self.backoff_delay(retries)
                retries += 1
                logger.debug(
                    f"{name} failed with {type(e).__name__}, "
                    f"retry {retries}/{self.max_retries} in {delay:.2f}s"
                )
                self._sleep(delay)
                continue

            if retries:
                logger.info(f"{name} succeeded after {retries} retries")
            self._record(retries, failed=False)
            return result

    def _record(self, retries: int, failed: bool) -> None:
        with self._lock:
            self._stats.calls += 1
            self._stats.retries += retries
            self._stats.failures += int(failed)

    @property
    def stats(self) -> RetryStats:
        """Snapshot of the call, retry and failure counters."""
        with self._lock:
            return RetryStats(**vars(self._stats))

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = RetryStats()
