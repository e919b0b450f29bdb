from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))
