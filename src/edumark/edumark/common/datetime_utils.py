from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional

from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_session_date(value: Any) -> Optional[date]:
    """Best-effort conversion of a stored session date.

    Returns None for missing or unparseable values so callers can drop the
    session instead of putting it in the wrong bucket.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def resolve_window(start: Optional[date], end: Optional[date], *, today: Optional[date] = None) -> tuple[date, date]:
    """Fill in missing report bounds.

    ``end`` defaults to today and ``start`` to DEFAULT_REPORT_DAYS before ``end``.
    Raises ValidationError when the resulting window is inverted.
    """

    end = end or today or now_local().date()
    start = start or (end - timedelta(days=DEFAULT_REPORT_DAYS))
    if start > end:
        raise ValidationError("start date must not be after end date")
    return start, end


def first_of_month(value: date, *, months_back: int = 0) -> date:
    month_index = value.year * 12 + (value.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def last_of_month(value: date) -> date:
    nxt = first_of_month(value, months_back=-1)
    return nxt - timedelta(days=1)


def current_semester(value: date) -> str:
    # July starts the first semester of an academic year.
    return "1" if value.month >= 7 else "2"
