from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Faculty, PendingUser, Student


class UserRepository(Protocol):
    """Repository interface for students and faculty.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_student(self, user_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_faculty(self, user_id: str) -> Optional[Faculty]:
        raise NotImplementedError

    def get_students(
        self,
        *,
        division: Optional[str] = None,
        batch: Optional[str] = None,
        approved: bool = True,
    ) -> Sequence[Student]:
        """Roster lookup; no filter returns every student with the given approval flag."""

        raise NotImplementedError

    def count_faculty(self) -> int:
        raise NotImplementedError

    def list_pending(self) -> Sequence[PendingUser]:
        raise NotImplementedError

    def set_approved(self, user_id: str, approved: bool) -> bool:
        """Returns False when no such user exists."""

        raise NotImplementedError
