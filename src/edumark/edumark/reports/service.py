from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.aggregator import filter_by_window, session_totals, student_stats, trend_buckets
from ..attendance.model import TrendPoint
from ..attendance.repository import AttendanceRepository
from ..classes.model import CourseClass
from ..classes.repository import ClassRepository
from ..classes.roster import resolve_roster, roster_by_grouping, sibling_offerings
from ..common.datetime_utils import now_local, resolve_window
from ..common.percentages import (
    attendance_percentage,
    attendance_standing,
    mean_percentage,
    required_sessions_for_target,
)
from ..core.constants import ADMIN_MONTHLY_BUCKETS, MINIMUM_ATTENDANCE
from ..core.enums import TrendPeriod
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Actor
from ..users.repository import UserRepository
from .builder import build_class_report
from .model import (
    AdminReport,
    ClassReport,
    ClassStatsEntry,
    DepartmentStats,
    FacultyClassSummary,
    FacultyReport,
    LowAttendanceEntry,
    StudentReport,
)

logger = logging.getLogger(__name__)


class ReportService:
    """Use cases: class/student/faculty/admin reports computed on demand.

    Every entry point takes the calling ``Actor``; access rules are:
    admins see everything, faculty see their own classes, students see
    only their own student report.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        users: UserRepository,
        *,
        minimum_attendance: int = MINIMUM_ATTENDANCE,
    ):
        self._attendance = attendance
        self._classes = classes
        self._users = users
        self._minimum = int(minimum_attendance)

    def _get_class(self, class_id: str) -> CourseClass:
        course = self._classes.get_by_id(class_id)
        if not course:
            raise NotFoundError(f"Class {class_id} not found")
        return course

    def _ensure_can_view_class(self, actor: Actor, course: CourseClass) -> None:
        if actor.is_admin:
            return
        if actor.is_faculty and actor.user_id == course.faculty_id:
            return
        raise AuthorizationError("You are not allowed to view reports for this class")

    def class_report(
        self,
        actor: Actor,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ClassReport:
        """Class report over an optional inclusive window (open ends mean unbounded)."""

        if start and end and start > end:
            raise ValidationError("start date must not be after end date")

        course = self._get_class(class_id)
        self._ensure_can_view_class(actor, course)

        offerings = sibling_offerings(course, self._classes.list_for_faculty(course.faculty_id))
        sessions = []
        for c in offerings:
            sessions.extend(self._attendance.get_sessions(class_id=c.class_id, start=start, end=end))
        roster = roster_by_grouping(course, self._users)

        logger.debug(
            "Class report %s: %d offerings, %d sessions, %d students",
            class_id,
            len(offerings),
            len(sessions),
            len(roster),
        )
        return build_class_report(course, offerings, sessions, roster, start=start, end=end, generated_at=now_local())

    def student_report(
        self,
        actor: Actor,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> StudentReport:
        if actor.is_student and actor.user_id != student_id:
            raise AuthorizationError("Students can only view their own report")

        student = self._users.get_student(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")

        start, end = resolve_window(start, end)
        entries = []
        for course in self._classes.list_active():
            if not course.enrolls(student):
                continue
            if actor.is_faculty and course.faculty_id != actor.user_id:
                continue
            sessions = filter_by_window(
                self._attendance.get_sessions(class_id=course.class_id, start=start, end=end), start, end
            )
            stats = student_stats(sessions, student.user_id)
            entries.append(
                ClassStatsEntry(
                    class_id=course.class_id,
                    class_name=course.name,
                    class_code=course.code,
                    faculty_name=course.faculty_name or "Unknown",
                    stats=stats,
                    standing=attendance_standing(stats.attendance_percentage),
                    sessions_to_minimum=required_sessions_for_target(
                        stats.present_sessions + stats.late_sessions, stats.total_sessions, self._minimum
                    ),
                )
            )

        total = sum(e.stats.total_sessions for e in entries)
        present = sum(e.stats.present_sessions for e in entries)
        late = sum(e.stats.late_sessions for e in entries)

        overall = attendance_percentage(present, total, late=late)
        return StudentReport(
            student_id=student.user_id,
            student_name=student.name,
            department=student.department or "Unknown",
            year=student.year or "Unknown",
            overall_attendance=overall,
            standing=attendance_standing(overall),
            classes=tuple(sorted(entries, key=lambda e: e.class_name)),
            start=start,
            end=end,
            generated_at=now_local(),
        )

    def faculty_report(
        self,
        actor: Actor,
        faculty_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> FacultyReport:
        if not (actor.is_admin or (actor.is_faculty and actor.user_id == faculty_id)):
            raise AuthorizationError("You are not allowed to view this faculty report")

        faculty = self._users.get_faculty(faculty_id)
        if not faculty:
            raise NotFoundError(f"Faculty {faculty_id} not found")

        start, end = resolve_window(start, end)
        summaries = []
        for course in self._classes.list_for_faculty(faculty_id):
            sessions = filter_by_window(
                self._attendance.get_sessions(class_id=course.class_id, start=start, end=end), start, end
            )
            totals = session_totals(sessions)
            summaries.append(
                FacultyClassSummary(
                    class_id=course.class_id,
                    class_name=course.name,
                    class_code=course.code,
                    total_students=len(resolve_roster(course, self._users)),
                    total_sessions=totals.total_sessions,
                    average_attendance=totals.average_attendance,
                )
            )

        return FacultyReport(
            faculty_id=faculty.user_id,
            faculty_name=faculty.name,
            total_classes=len(summaries),
            total_sessions=sum(s.total_sessions for s in summaries),
            classes=tuple(summaries),
            start=start,
            end=end,
            generated_at=now_local(),
        )

    def admin_report(
        self,
        actor: Actor,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> AdminReport:
        if not actor.is_admin:
            raise AuthorizationError("Only admins can view the overview report")

        today = today or now_local().date()
        start, end = resolve_window(start, end, today=today)

        students = list(self._users.get_students(approved=True))
        classes = list(self._classes.list_active())
        all_sessions = list(self._attendance.get_sessions())
        in_window = filter_by_window(all_sessions, start, end)
        overall = session_totals(in_window)

        by_class: dict[str, list] = {}
        for s in in_window:
            by_class.setdefault(s.class_id, []).append(s)

        departments = sorted({s.department for s in students if s.department})
        dept_stats = []
        for department in departments:
            dept_classes = [c for c in classes if c.department == department]
            class_averages = []
            for c in dept_classes:
                totals = session_totals(by_class.get(c.class_id, []))
                if totals.total_student_sessions > 0:
                    class_averages.append(totals.average_attendance)
            dept_stats.append(
                DepartmentStats(
                    department=department,
                    total_students=sum(1 for s in students if s.department == department),
                    total_classes=len(dept_classes),
                    average_attendance=mean_percentage(class_averages),
                )
            )

        monthly = trend_buckets(all_sessions, TrendPeriod.MONTHLY, today=today, count=ADMIN_MONTHLY_BUCKETS)

        return AdminReport(
            total_students=len(students),
            total_faculty=self._users.count_faculty(),
            total_classes=len(classes),
            total_sessions=overall.total_sessions,
            overall_attendance=overall.average_attendance,
            departments=tuple(dept_stats),
            monthly=tuple(monthly),
            start=start,
            end=end,
            generated_at=now_local(),
        )

    def low_attendance_students(
        self,
        actor: Actor,
        *,
        threshold: Optional[int] = None,
        class_id: Optional[str] = None,
    ) -> list[LowAttendanceEntry]:
        """Students below ``threshold`` percent (the configured minimum by default), lowest first."""

        threshold = self._minimum if threshold is None else int(threshold)

        if actor.is_student:
            raise AuthorizationError("Students cannot list low attendance")

        if class_id:
            course = self._get_class(class_id)
            self._ensure_can_view_class(actor, course)
            classes = [course]
        elif actor.is_admin:
            classes = list(self._classes.list_active())
        else:
            classes = list(self._classes.list_for_faculty(actor.user_id))

        out = []
        for course in classes:
            sessions = self._attendance.get_sessions(class_id=course.class_id)
            for student in resolve_roster(course, self._users):
                stats = student_stats(sessions, student.user_id)
                if stats.attendance_percentage < threshold:
                    out.append(
                        LowAttendanceEntry(
                            student_id=student.user_id,
                            student_name=student.name,
                            class_id=course.class_id,
                            class_name=course.name,
                            attendance_percentage=stats.attendance_percentage,
                            sessions_to_minimum=required_sessions_for_target(
                                stats.present_sessions + stats.late_sessions, stats.total_sessions, threshold
                            ),
                        )
                    )

        out.sort(key=lambda e: (e.attendance_percentage, e.student_name))
        return out

    def attendance_trends(
        self,
        actor: Actor,
        *,
        period: TrendPeriod | str = TrendPeriod.WEEKLY,
        class_id: Optional[str] = None,
        faculty_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[TrendPoint]:
        try:
            period = TrendPeriod(period)
        except ValueError as exc:
            raise ValidationError(f"Unknown trend period: {period}") from exc

        if actor.is_student:
            raise AuthorizationError("Students cannot view attendance trends")
        if class_id:
            self._ensure_can_view_class(actor, self._get_class(class_id))
        elif actor.is_faculty:
            if faculty_id and faculty_id != actor.user_id:
                raise AuthorizationError("Faculty can only view their own trends")
            faculty_id = actor.user_id

        sessions = self._attendance.get_sessions(class_id=class_id, faculty_id=faculty_id)
        return trend_buckets(sessions, period, today=today or now_local().date())
