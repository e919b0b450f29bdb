from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CourseClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: str) -> Optional[CourseClass]:
        raise NotImplementedError

    def list_for_faculty(self, faculty_id: str, *, active_only: bool = True) -> Sequence[CourseClass]:
        raise NotImplementedError

    def list_active(self) -> Sequence[CourseClass]:
        raise NotImplementedError

    def increment_session_count(self, class_id: str) -> None:
        raise NotImplementedError

    def add(self, course: CourseClass) -> str:
        raise NotImplementedError

    def save(self, course: CourseClass) -> None:
        """Overwrite the stored class, explicit roster included."""

        raise NotImplementedError
