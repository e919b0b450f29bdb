from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..classes.model import CourseClass
from ..classes.repository import ClassRepository
from ..classes.roster import resolve_roster
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Actor
from ..users.repository import UserRepository
from .aggregator import student_stats
from .model import AttendanceRecord, AttendanceSession, AttendanceStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentClassSummary:
    student_id: str
    student_name: str
    class_id: str
    class_name: str
    class_code: str
    faculty_name: str
    stats: AttendanceStats


class AttendanceService:
    """Use cases: mark a class session, read a student's per-class stats."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        users: UserRepository,
        *,
        default_status: AttendanceStatus = AttendanceStatus.PRESENT,
    ):
        self._attendance = attendance
        self._classes = classes
        self._users = users
        self._default_status = AttendanceStatus(default_status)

    def _get_class(self, class_id: str) -> CourseClass:
        course = self._classes.get_by_id(class_id)
        if not course:
            raise NotFoundError(f"Class {class_id} not found")
        return course

    def mark_attendance(
        self,
        actor: Actor,
        *,
        class_id: str,
        session_date: date,
        topic: str,
        duration: int,
        marks: Mapping[str, AttendanceStatus | str],
        remarks: Optional[Mapping[str, str]] = None,
    ) -> AttendanceSession:
        """Create a finalized session with one record per enrolled student.

        Students on the roster without an explicit mark get ``default_status``.
        """

        course = self._get_class(class_id)
        if not (actor.is_admin or (actor.is_faculty and actor.user_id == course.faculty_id)):
            raise AuthorizationError("Only the assigned faculty can mark attendance for this class")

        topic = require_non_empty(topic, "topic")
        if int(duration) <= 0:
            raise ValidationError("duration must be a positive number of minutes")
        if self._attendance.exists_for_date(class_id, session_date):
            raise ValidationError(f"Attendance for {session_date.isoformat()} was already taken")

        roster = resolve_roster(course, self._users)
        roster_ids = {s.user_id for s in roster}
        unknown = sorted(set(marks) - roster_ids)
        if unknown:
            raise ValidationError("Students not enrolled in this class", [f"Unknown student {sid}" for sid in unknown])

        try:
            statuses = {sid: AttendanceStatus(v) for sid, v in marks.items()}
        except ValueError as exc:
            raise ValidationError(f"Invalid attendance status: {exc}") from exc

        remarks = remarks or {}
        records = [
            AttendanceRecord(
                student_id=s.user_id,
                student_name=s.name,
                status=statuses.get(s.user_id, self._default_status),
                remarks=remarks.get(s.user_id) or None,
            )
            for s in roster
        ]

        session = AttendanceSession.create(
            session_id=uuid.uuid4().hex,
            class_id=course.class_id,
            faculty_id=course.faculty_id,
            session_date=session_date,
            session_number=self._attendance.next_session_number(course.class_id),
            topic=topic,
            duration=int(duration),
            records=records,
            class_name=course.name,
            class_code=course.code,
            faculty_name=course.faculty_name,
        )
        self._attendance.add_session(session)
        self._classes.increment_session_count(course.class_id)
        logger.info(
            "Session %s #%d recorded for class %s (%d present, %d late, %d absent)",
            session.session_id,
            session.session_number,
            course.class_id,
            session.present_count,
            session.late_count,
            session.absent_count,
        )
        return session

    def student_attendance(self, actor: Actor, student_id: str) -> list[StudentClassSummary]:
        if actor.is_student and actor.user_id != student_id:
            raise AuthorizationError("Students can only view their own attendance")

        student = self._users.get_student(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")

        out = []
        for course in self._classes.list_active():
            if not course.enrolls(student):
                continue
            sessions = self._attendance.get_sessions(class_id=course.class_id)
            out.append(
                StudentClassSummary(
                    student_id=student.user_id,
                    student_name=student.name,
                    class_id=course.class_id,
                    class_name=course.name,
                    class_code=course.code,
                    faculty_name=course.faculty_name or "Unknown",
                    stats=student_stats(sessions, student.user_id),
                )
            )
        out.sort(key=lambda s: s.class_name)
        return out
