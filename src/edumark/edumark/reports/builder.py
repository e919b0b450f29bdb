"""Pure report assembly.

The service layer fetches classes, sessions and rosters; the functions here
only reshape that snapshot.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.aggregator import (
    filter_by_window,
    session_percentage,
    session_totals,
    sort_chronologically,
    student_stats,
)
from ..attendance.model import AttendanceSession
from ..classes.model import CourseClass
from ..common.datetime_utils import coerce_session_date
from ..common.percentages import mean_percentage
from ..users.model import Student
from .model import ClassReport, SessionOverview, StudentReportRow, StudentSessionEntry


def build_session_overview(ordered: Sequence[AttendanceSession]) -> list[SessionOverview]:
    """Renumber 1..N in the given order; stored session numbers are ignored."""

    return [
        SessionOverview(
            session_number=index,
            session_date=coerce_session_date(s.session_date),
            class_id=s.class_id,
            topic=s.topic,
            duration=s.duration,
            present_count=s.present_count,
            absent_count=s.absent_count,
            late_count=s.late_count,
            attendance_percentage=session_percentage(s),
        )
        for index, s in enumerate(ordered, start=1)
    ]


def build_student_row(student: Student, ordered: Sequence[AttendanceSession]) -> StudentReportRow:
    entries = []
    for s in ordered:
        record = s.record_for(student.user_id)
        if record is None:
            continue
        entries.append(
            StudentSessionEntry(
                session_number=len(entries) + 1,
                session_date=coerce_session_date(s.session_date),
                topic=s.topic,
                status=record.status,
                remarks=record.remarks,
            )
        )
    return StudentReportRow(student=student, stats=student_stats(ordered, student.user_id), sessions=tuple(entries))


def build_class_report(
    target: CourseClass,
    offerings: Sequence[CourseClass],
    sessions: Sequence[AttendanceSession],
    roster: Sequence[Student],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    generated_at: Optional[datetime] = None,
) -> ClassReport:
    """Merge every offering's sessions into one chronological timeline.

    An empty roster or an empty session list yields a report full of zeros.
    """

    ordered = sort_chronologically(filter_by_window(sessions, start, end))

    rows = [build_student_row(student, ordered) for student in roster]
    rows.sort(key=lambda r: (r.stats.attendance_percentage, r.student.name))

    return ClassReport(
        class_id=target.class_id,
        class_name=target.name,
        class_code=target.code,
        subject=target.subject,
        class_type=target.type,
        group_label=target.kind.label,
        faculty_id=target.faculty_id,
        faculty_name=target.faculty_name,
        merged_class_ids=tuple(c.class_id for c in offerings),
        total_classes=len(offerings),
        total_sessions=len(ordered),
        total_students=len(roster),
        average_attendance=mean_percentage(r.stats.attendance_percentage for r in rows),
        session_weighted_attendance=session_totals(ordered).average_attendance,
        students=tuple(rows),
        sessions=tuple(build_session_overview(ordered)),
        start=start,
        end=end,
        generated_at=generated_at or datetime.now(),
    )
