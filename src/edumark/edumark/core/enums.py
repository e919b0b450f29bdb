from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access checks."""

    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Per-student status stored inside an attendance session."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ClassType(str, Enum):
    """Division-based lectures vs batch-based labs."""

    CLASS = "class"
    LAB = "lab"


class CsvRowKind(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"


class AttendanceStanding(str, Enum):
    """Bands used by dashboards to colour a percentage."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    CRITICAL = "critical"


class TrendPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
