"""Delimited-text parsing and schema validation for bulk user uploads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..common.validators import is_blank, is_valid_email
from ..core.constants import (
    BATCHES_BY_DIVISION,
    DIVISIONS,
    FACULTY_REQUIRED_COLUMNS,
    STUDENT_REQUIRED_COLUMNS,
)
from ..core.enums import CsvRowKind

_QUOTES = "\"'"

# Data rows start on line 2 of the file (line 1 is the header).
_FIRST_DATA_LINE = 2


@dataclass(frozen=True)
class CsvValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


def detect_separator(header_line: str) -> str:
    if ";" in header_line and len(header_line.split(";")) > len(header_line.split(",")):
        return ";"
    return ","


def _strip_outer_quotes(value: str) -> str:
    value = value.strip()
    if value[:1] in _QUOTES:
        value = value[1:]
    if value[-1:] in _QUOTES:
        value = value[:-1]
    return value


def parse_csv(text: str) -> list[dict[str, str]]:
    """Split raw upload text into one dict per data line.

    Header cells lose every quote character; value cells lose surrounding
    quotes only. Blank lines and rows whose cells are all empty are dropped.
    """

    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        return []

    separator = detect_separator(lines[0])
    headers = [h.strip().translate({ord(q): None for q in _QUOTES}) for h in lines[0].split(separator)]

    rows = []
    for line in lines[1:]:
        values = [_strip_outer_quotes(v) for v in line.split(separator)]
        row = {h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)}
        if any(v != "" for v in row.values()):
            rows.append(row)
    return rows


def required_columns(kind: CsvRowKind | str) -> Sequence[str]:
    kind = CsvRowKind(kind)
    return STUDENT_REQUIRED_COLUMNS if kind == CsvRowKind.STUDENT else FACULTY_REQUIRED_COLUMNS


def _check_division_batch(row: dict[str, str], line_no: int) -> list[str]:
    division = (row.get("division") or "").strip()
    batch = (row.get("batch") or "").strip()
    if not division or not batch:
        return []
    if division not in DIVISIONS:
        return [f"Row {line_no}: Invalid division '{division}'. Must be one of {', '.join(DIVISIONS)}"]
    allowed = BATCHES_BY_DIVISION[division]
    if batch not in allowed:
        return [
            f"Row {line_no}: Invalid batch '{batch}' for division {division}. "
            f"Valid batches for division {division}: {', '.join(allowed)}"
        ]
    return []


def _check_email(row: dict[str, str], line_no: int) -> list[str]:
    email = (row.get("emailID") or "").strip()
    if email and not is_valid_email(email):
        return [f"Row {line_no}: Invalid email format for emailID"]
    return []


def validate_rows(rows: Sequence[dict[str, str]], kind: CsvRowKind | str) -> CsvValidationResult:
    """Check every row and report every problem; any error rejects the whole batch."""

    kind = CsvRowKind(kind)
    columns = required_columns(kind)
    rows = list(rows)

    if not rows:
        return CsvValidationResult(valid=False, errors=["CSV file is empty or invalid"])

    errors: list[str] = []
    missing = [c for c in columns if c not in rows[0]]
    if missing:
        errors.append(f"Missing required columns: {', '.join(missing)}")

    for index, row in enumerate(rows):
        line_no = index + _FIRST_DATA_LINE
        for column in columns:
            if is_blank(row.get(column)):
                errors.append(f"Row {line_no}: Missing value for {column}")
        if kind == CsvRowKind.STUDENT:
            errors.extend(_check_division_batch(row, line_no))
        else:
            errors.extend(_check_email(row, line_no))

    return CsvValidationResult(valid=not errors, errors=errors, rows=rows)


def validate_csv(text: str, kind: CsvRowKind | str) -> CsvValidationResult:
    return validate_rows(parse_csv(text), kind)
