from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, TypeVar

T = TypeVar("T")


class RetryPolicy(ABC):
    """Strategy Pattern: decide whether and how long to wait before retrying a gateway call."""

    @abstractmethod
    def run(self, operation: Callable[[], T], *, label: str = "") -> T:
        raise NotImplementedError
