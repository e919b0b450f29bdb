from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's mark inside a session."""

    student_id: str
    student_name: str
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one class meeting.

    Sessions are finalized on creation. Records are a tuple and the counts are
    derived once by ``create`` and stored alongside for cheap aggregate reads.
    ``session_date`` is whatever storage returned; it may be None or garbage
    on legacy rows and is coerced by the aggregation code.
    """

    session_id: str
    class_id: str
    faculty_id: str
    session_date: object
    session_number: int
    topic: str
    duration: int
    records: tuple[AttendanceRecord, ...]
    total_students: int
    present_count: int
    absent_count: int
    late_count: int
    class_name: str = ""
    class_code: str = ""
    faculty_name: str = ""

    @classmethod
    def create(
        cls,
        *,
        session_id: str,
        class_id: str,
        faculty_id: str,
        session_date: date,
        session_number: int,
        topic: str,
        duration: int,
        records: Iterable[AttendanceRecord],
        class_name: str = "",
        class_code: str = "",
        faculty_name: str = "",
    ) -> "AttendanceSession":
        records = tuple(records)
        statuses = [r.status for r in records]
        return cls(
            session_id=session_id,
            class_id=class_id,
            faculty_id=faculty_id,
            session_date=session_date,
            session_number=int(session_number),
            topic=topic,
            duration=int(duration),
            records=records,
            total_students=len(records),
            present_count=statuses.count(AttendanceStatus.PRESENT),
            absent_count=statuses.count(AttendanceStatus.ABSENT),
            late_count=statuses.count(AttendanceStatus.LATE),
            class_name=class_name,
            class_code=class_code,
            faculty_name=faculty_name,
        )

    def record_for(self, student_id: str) -> Optional[AttendanceRecord]:
        for r in self.records:
            if r.student_id == student_id:
                return r
        return None


@dataclass(frozen=True)
class AttendanceStats:
    total_sessions: int
    present_sessions: int
    absent_sessions: int
    late_sessions: int
    attendance_percentage: int


@dataclass(frozen=True)
class SessionTotals:
    """Session-weighted totals: every student-slot counts once."""

    total_sessions: int
    total_student_sessions: int
    present_count: int
    absent_count: int
    late_count: int
    average_attendance: int


@dataclass(frozen=True)
class TrendPoint:
    label: str
    start: date
    end: date
    total_sessions: int
    average_attendance: int
