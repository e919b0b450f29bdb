from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import MINIMUM_ATTENDANCE
from ..core.enums import AttendanceStanding


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def attendance_percentage(present: int, total: int, *, late: int = 0) -> int:
    """Whole-number attendance percentage; late counts as attended."""

    if total <= 0:
        return 0
    return round_half_up((present + late) * 100 / total)


def mean_percentage(values) -> int:
    values = list(values)
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def attendance_standing(percentage: float) -> AttendanceStanding:
    if percentage >= 90:
        return AttendanceStanding.EXCELLENT
    if percentage >= 80:
        return AttendanceStanding.GOOD
    if percentage >= 70:
        return AttendanceStanding.AVERAGE
    if percentage >= 60:
        return AttendanceStanding.POOR
    return AttendanceStanding.CRITICAL


def required_sessions_for_target(attended: int, total: int, target: int = MINIMUM_ATTENDANCE) -> int:
    """Consecutive attended sessions needed to lift the percentage to ``target``.

    Solves (attended + x) / (total + x) >= target / 100 for the smallest x.
    """

    if total <= 0 or target >= 100:
        return 0
    if attended * 100 >= target * total:
        return 0
    return max(0, math.ceil((target * total - 100 * attended) / (100 - target)))
