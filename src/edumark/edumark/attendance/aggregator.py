"""Pure reductions over attendance sessions.

Nothing here touches storage; every function takes an already-fetched
snapshot and returns a fresh value, so results do not depend on input order.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import coerce_session_date, first_of_month, last_of_month
from ..common.percentages import attendance_percentage
from ..core.constants import MONTHLY_TREND_BUCKETS, WEEKLY_TREND_BUCKETS
from ..core.enums import AttendanceStatus, TrendPeriod
from .model import AttendanceSession, AttendanceStats, SessionTotals, TrendPoint


def student_stats(sessions: Iterable[AttendanceSession], student_id: str) -> AttendanceStats:
    """Counts for one student.

    Sessions without a record for the student are skipped, so a student added
    to a class after some sessions were taken is not marked down for them.
    """

    present = absent = late = 0
    for s in sessions:
        record = s.record_for(student_id)
        if record is None:
            continue
        if record.status == AttendanceStatus.PRESENT:
            present += 1
        elif record.status == AttendanceStatus.LATE:
            late += 1
        else:
            absent += 1

    total = present + absent + late
    return AttendanceStats(
        total_sessions=total,
        present_sessions=present,
        absent_sessions=absent,
        late_sessions=late,
        attendance_percentage=attendance_percentage(present, total, late=late),
    )


def session_percentage(session: AttendanceSession) -> int:
    return attendance_percentage(session.present_count, session.total_students, late=session.late_count)


def session_totals(sessions: Iterable[AttendanceSession]) -> SessionTotals:
    count = slots = present = absent = late = 0
    for s in sessions:
        count += 1
        slots += s.total_students
        present += s.present_count
        absent += s.absent_count
        late += s.late_count

    return SessionTotals(
        total_sessions=count,
        total_student_sessions=slots,
        present_count=present,
        absent_count=absent,
        late_count=late,
        average_attendance=attendance_percentage(present, slots, late=late),
    )


def filter_by_window(
    sessions: Iterable[AttendanceSession],
    start: Optional[date],
    end: Optional[date],
) -> list[AttendanceSession]:
    """Inclusive on both ends. Sessions whose date cannot be read are dropped."""

    kept = []
    for s in sessions:
        d = coerce_session_date(s.session_date)
        if d is None:
            continue
        if start is not None and d < start:
            continue
        if end is not None and d > end:
            continue
        kept.append(s)
    return kept


def sort_chronologically(sessions: Iterable[AttendanceSession]) -> list[AttendanceSession]:
    """Date order, ties broken by stored session number then id. Undated sessions are dropped."""

    dated = [(coerce_session_date(s.session_date), s) for s in sessions]
    dated = [(d, s) for d, s in dated if d is not None]
    dated.sort(key=lambda pair: (pair[0], pair[1].session_number, pair[1].session_id))
    return [s for _, s in dated]


def trend_windows(period: TrendPeriod, *, today: date, count: Optional[int] = None) -> list[tuple[str, date, date]]:
    period = TrendPeriod(period)
    windows = []
    if period == TrendPeriod.WEEKLY:
        count = count or WEEKLY_TREND_BUCKETS
        for i in range(count - 1, -1, -1):
            end = today - timedelta(days=7 * i)
            start = end - timedelta(days=6)
            windows.append((f"Week of {start.isoformat()}", start, end))
    else:
        count = count or MONTHLY_TREND_BUCKETS
        for i in range(count - 1, -1, -1):
            start = first_of_month(today, months_back=i)
            windows.append((start.strftime("%b %Y"), start, last_of_month(start)))
    return windows


def trend_buckets(
    sessions: Sequence[AttendanceSession],
    period: TrendPeriod,
    *,
    today: date,
    count: Optional[int] = None,
) -> list[TrendPoint]:
    points = []
    for label, start, end in trend_windows(period, today=today, count=count):
        totals = session_totals(filter_by_window(sessions, start, end))
        points.append(
            TrendPoint(
                label=label,
                start=start,
                end=end,
                total_sessions=totals.total_sessions,
                average_attendance=totals.average_attendance,
            )
        )
    return points
