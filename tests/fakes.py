from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from src.edumark.edumark.attendance.model import AttendanceRecord, AttendanceSession
from src.edumark.edumark.classes.model import Batch, CourseClass, Division
from src.edumark.edumark.core.enums import AttendanceStatus, Role
from src.edumark.edumark.core.exceptions import RateLimitedError
from src.edumark.edumark.imports.gateway import AccountRequest
from src.edumark.edumark.users.model import Actor, Faculty, PendingUser, Student

ADMIN = Actor(user_id="admin-1", role=Role.ADMIN, name="Admin")
FACULTY = Actor(user_id="fac-1", role=Role.FACULTY, name="Prof. Rao")
OTHER_FACULTY = Actor(user_id="fac-2", role=Role.FACULTY, name="Prof. Iyer")


def student(user_id: str, name: str, *, division: str = "5", batch: str = "K5", department: str = "Computer Engineering") -> Student:
    return Student(
        user_id=user_id,
        name=name,
        student_id=f"S{user_id}",
        roll_no=user_id,
        division=division,
        batch=batch,
        department=department,
        year="TE",
    )


def lecture(class_id: str, *, subject: str = "DBMS", division: str = "5", faculty_id: str = "fac-1", **kwargs) -> CourseClass:
    return CourseClass(
        class_id=class_id,
        name=kwargs.pop("name", f"{subject} {class_id}"),
        code=kwargs.pop("code", subject[:4].upper()),
        subject=subject,
        kind=Division(division),
        faculty_id=faculty_id,
        faculty_name="Prof. Rao" if faculty_id == "fac-1" else "Prof. Iyer",
        department=kwargs.pop("department", "Computer Engineering"),
        **kwargs,
    )


def lab(class_id: str, *, subject: str = "DBMS Lab", batch: str = "K5", faculty_id: str = "fac-1", **kwargs) -> CourseClass:
    return CourseClass(
        class_id=class_id,
        name=kwargs.pop("name", f"{subject} {class_id}"),
        code=kwargs.pop("code", "DBL"),
        subject=subject,
        kind=Batch(batch),
        faculty_id=faculty_id,
        faculty_name="Prof. Rao",
        department=kwargs.pop("department", "Computer Engineering"),
        **kwargs,
    )


def session(
    session_id: str,
    class_id: str,
    session_date,
    marks: dict[str, str],
    *,
    number: int = 1,
    faculty_id: str = "fac-1",
    topic: str = "",
    duration: int = 60,
) -> AttendanceSession:
    return AttendanceSession.create(
        session_id=session_id,
        class_id=class_id,
        faculty_id=faculty_id,
        session_date=session_date,
        session_number=number,
        topic=topic or f"Topic {session_id}",
        duration=duration,
        records=[
            AttendanceRecord(student_id=sid, student_name=f"Student {sid}", status=AttendanceStatus(status))
            for sid, status in marks.items()
        ],
    )


@dataclass
class InMemoryUsers:
    students: list[Student] = field(default_factory=list)
    faculty: list[Faculty] = field(default_factory=list)
    last_roster_filter: Optional[dict] = None

    def get_student(self, user_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.user_id == user_id), None)

    def get_faculty(self, user_id: str) -> Optional[Faculty]:
        return next((f for f in self.faculty if f.user_id == user_id), None)

    def get_students(self, *, division=None, batch=None, approved=True):
        self.last_roster_filter = {"division": division, "batch": batch, "approved": approved}
        out = [s for s in self.students if s.approved == approved]
        if division is not None:
            out = [s for s in out if s.division == division]
        if batch is not None:
            out = [s for s in out if s.batch == batch]
        return out

    def count_faculty(self) -> int:
        return len(self.faculty)

    def list_pending(self):
        return [PendingUser(s.user_id, s.name, Role.STUDENT, s.email) for s in self.students if not s.approved]

    def set_approved(self, user_id: str, approved: bool) -> bool:
        for i, s in enumerate(self.students):
            if s.user_id == user_id:
                self.students[i] = dataclasses.replace(s, approved=approved)
                return True
        return self.get_faculty(user_id) is not None


@dataclass
class InMemoryClasses:
    classes: list[CourseClass] = field(default_factory=list)
    increments: list[str] = field(default_factory=list)

    def get_by_id(self, class_id: str) -> Optional[CourseClass]:
        return next((c for c in self.classes if c.class_id == class_id), None)

    def list_for_faculty(self, faculty_id: str, *, active_only: bool = True):
        return [c for c in self.classes if c.faculty_id == faculty_id and (c.is_active or not active_only)]

    def list_active(self):
        return [c for c in self.classes if c.is_active]

    def increment_session_count(self, class_id: str) -> None:
        self.increments.append(class_id)

    def add(self, course: CourseClass) -> str:
        self.classes.append(course)
        return course.class_id

    def save(self, course: CourseClass) -> None:
        self.classes = [course if c.class_id == course.class_id else c for c in self.classes]


class InMemoryAttendance:
    """Returns sessions in reverse insertion order to make sure callers sort themselves."""

    def __init__(self, sessions=None):
        self.sessions: list[AttendanceSession] = list(sessions or [])

    def get_sessions(self, *, class_id=None, faculty_id=None, start=None, end=None):
        out = list(reversed(self.sessions))
        if class_id is not None:
            out = [s for s in out if s.class_id == class_id]
        elif faculty_id is not None:
            out = [s for s in out if s.faculty_id == faculty_id]
        return out

    def next_session_number(self, class_id: str) -> int:
        numbers = [s.session_number for s in self.sessions if s.class_id == class_id]
        return max(numbers, default=0) + 1

    def exists_for_date(self, class_id: str, session_date: date) -> bool:
        return any(s.class_id == class_id and s.session_date == session_date for s in self.sessions)

    def add_session(self, session: AttendanceSession) -> str:
        self.sessions.append(session)
        return session.session_id


class FakeGateway:
    """Stateful account store keyed by (role, external id).

    ``rate_limit_first`` makes the first N replace calls per id rate limited;
    ids in ``fail_ids`` are always rate limited.
    """

    def __init__(self, *, rate_limit_first: int = 0, fail_ids=(), existing=()):
        self.accounts: dict[tuple[Role, str], AccountRequest] = {(r.role, r.external_id): r for r in existing}
        self.created: list[AccountRequest] = []
        self.attempts: dict[str, int] = {}
        self._rate_limit_first = rate_limit_first
        self._fail_ids = set(fail_ids)

    def replace_account(self, request: AccountRequest) -> str:
        n = self.attempts.get(request.external_id, 0) + 1
        self.attempts[request.external_id] = n
        if request.external_id in self._fail_ids or n <= self._rate_limit_first:
            raise RateLimitedError("too many requests")
        self.accounts[(request.role, request.external_id)] = request
        self.created.append(request)
        return f"uid-{request.external_id}"
