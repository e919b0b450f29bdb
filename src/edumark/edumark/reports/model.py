from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceStats, TrendPoint
from ..core.enums import AttendanceStanding, AttendanceStatus, ClassType
from ..users.model import Student


@dataclass(frozen=True)
class StudentSessionEntry:
    """One line of a student's own timeline, numbered 1..k in date order."""

    session_number: int
    session_date: date
    topic: str
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class StudentReportRow:
    student: Student
    stats: AttendanceStats
    sessions: tuple[StudentSessionEntry, ...]


@dataclass(frozen=True)
class SessionOverview:
    session_number: int
    session_date: date
    class_id: str
    topic: str
    duration: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_percentage: int


@dataclass(frozen=True)
class ClassReport:
    """Report for one class, merged with the faculty's other classes of the same offering.

    ``average_attendance`` is the unweighted mean of per-student percentages;
    ``session_weighted_attendance`` counts every student-slot once. They differ
    whenever students sat different numbers of sessions and are kept apart.
    """

    class_id: str
    class_name: str
    class_code: str
    subject: str
    class_type: ClassType
    group_label: str
    faculty_id: str
    faculty_name: str
    merged_class_ids: tuple[str, ...]
    total_classes: int
    total_sessions: int
    total_students: int
    average_attendance: int
    session_weighted_attendance: int
    students: tuple[StudentReportRow, ...]
    sessions: tuple[SessionOverview, ...]
    start: Optional[date]
    end: Optional[date]
    generated_at: datetime


@dataclass(frozen=True)
class ClassStatsEntry:
    class_id: str
    class_name: str
    class_code: str
    faculty_name: str
    stats: AttendanceStats
    standing: AttendanceStanding
    sessions_to_minimum: int


@dataclass(frozen=True)
class StudentReport:
    student_id: str
    student_name: str
    department: str
    year: str
    overall_attendance: int
    standing: AttendanceStanding
    classes: tuple[ClassStatsEntry, ...]
    start: date
    end: date
    generated_at: datetime


@dataclass(frozen=True)
class FacultyClassSummary:
    class_id: str
    class_name: str
    class_code: str
    total_students: int
    total_sessions: int
    average_attendance: int


@dataclass(frozen=True)
class FacultyReport:
    faculty_id: str
    faculty_name: str
    total_classes: int
    total_sessions: int
    classes: tuple[FacultyClassSummary, ...]
    start: date
    end: date
    generated_at: datetime


@dataclass(frozen=True)
class DepartmentStats:
    department: str
    total_students: int
    total_classes: int
    average_attendance: int


@dataclass(frozen=True)
class AdminReport:
    total_students: int
    total_faculty: int
    total_classes: int
    total_sessions: int
    overall_attendance: int
    departments: tuple[DepartmentStats, ...]
    monthly: tuple[TrendPoint, ...]
    start: date
    end: date
    generated_at: datetime


@dataclass(frozen=True)
class LowAttendanceEntry:
    student_id: str
    student_name: str
    class_id: str
    class_name: str
    attendance_percentage: int
    sessions_to_minimum: int
