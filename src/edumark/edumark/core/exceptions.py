from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` carries every problem found, so callers can report a whole
    CSV batch at once instead of stopping at the first bad row.
    """

    def __init__(self, message: str, errors: Sequence[str] = ()):
        super().__init__(message)
        self.errors = list(errors) or [message]


class NotFoundError(DomainError):
    """Raised when a referenced class, student or faculty does not exist."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class UpstreamError(DomainError):
    """Raised when the storage layer or the account gateway fails."""


class RateLimitedError(UpstreamError):
    """The account gateway refused a call because of rate limiting."""
