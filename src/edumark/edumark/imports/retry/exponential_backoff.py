from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ...core.constants import DEFAULT_IMPORT_BASE_DELAY_SECONDS, DEFAULT_IMPORT_MAX_RETRIES
from ...core.exceptions import RateLimitedError
from .base import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExponentialBackoff(RetryPolicy):
    """Retry rate-limited calls, doubling the wait each time (3s, 6s, 12s, 24s by default).

    Only ``RateLimitedError`` is retried; the last one is re-raised once
    ``max_attempts`` is reached.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_IMPORT_MAX_RETRIES,
        base_delay: float = DEFAULT_IMPORT_BASE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = int(max_attempts)
        self._base_delay = float(base_delay)
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return self._base_delay * (2 ** (attempt - 1))

    def run(self, operation: Callable[[], T], *, label: str = "") -> T:
        attempt = 1
        while True:
            try:
                return operation()
            except RateLimitedError:
                if attempt >= self._max_attempts:
                    raise
                wait = self.delay_for(attempt)
                logger.warning(
                    "Rate limited%s, retrying in %.1fs (attempt %d/%d)",
                    f" on {label}" if label else "",
                    wait,
                    attempt,
                    self._max_attempts,
                )
                self._sleep(wait)
                attempt += 1
