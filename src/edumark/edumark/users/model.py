from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student.

    Note: plain data object, no storage access. ``division`` and ``batch`` are
    what class rosters are matched against (lectures by division, labs by batch).
    """

    user_id: str
    name: str
    student_id: str
    roll_no: Optional[str] = None
    division: Optional[str] = None
    batch: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    elective_subject: Optional[str] = None
    email: Optional[str] = None
    approved: bool = True


@dataclass(frozen=True)
class Faculty:
    user_id: str
    name: str
    employee_id: str
    email: Optional[str] = None
    designation: Optional[str] = None
    subject: Optional[str] = None


@dataclass(frozen=True)
class Actor:
    """Who is calling a service.

    Passed explicitly into every report/marking call instead of being read
    from a request-global auth context.
    """

    user_id: str
    role: Role
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_faculty(self) -> bool:
        return self.role == Role.FACULTY

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT


@dataclass(frozen=True)
class PendingUser:
    """A self-registered account waiting for an administrator."""

    user_id: str
    name: str
    role: Role
    email: Optional[str] = None
