from __future__ import annotations

from typing import Callable, TypeVar

from .base import RetryPolicy

T = TypeVar("T")


class NoRetry(RetryPolicy):
    """Call once; errors propagate unchanged."""

    def run(self, operation: Callable[[], T], *, label: str = "") -> T:
        return operation()
