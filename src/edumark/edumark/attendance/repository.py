from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def get_sessions(
        self,
        *,
        class_id: Optional[str] = None,
        faculty_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceSession]:
        """Unordered; callers sort. Date bounds are a storage-side pre-filter only."""

        raise NotImplementedError

    def next_session_number(self, class_id: str) -> int:
        raise NotImplementedError

    def exists_for_date(self, class_id: str, session_date: date) -> bool:
        raise NotImplementedError

    def add_session(self, session: AttendanceSession) -> str:
        """Persist a finalized session; there is no update or delete counterpart."""

        raise NotImplementedError
