from __future__ import annotations

import pytest

from src.edumark.edumark.imports.csv_parser import detect_separator, parse_csv, validate_csv, validate_rows

STUDENT_HEADER = "studentName;studyingYear;rollNo;division;batch;electiveSubject;sId;sPassword"
FACULTY_HEADER = "name,designation,emailID,subject,E_ID,E_password"


def test_detects_semicolon_separator():
    assert detect_separator(STUDENT_HEADER) == ";"
    assert detect_separator(FACULTY_HEADER) == ","


def test_parse_strips_bom_and_quotes():
    text = '\ufeff"name",designation\r\n"Dr. Rao",\'Professor\'\r\n\r\n,\r\n'

    rows = parse_csv(text)

    assert rows == [{"name": "Dr. Rao", "designation": "Professor"}]


def test_parse_pads_short_rows_and_needs_a_data_line():
    assert parse_csv("a,b,c\n1") == [{"a": "1", "b": "", "c": ""}]
    assert parse_csv("a,b,c\n") == []
    assert parse_csv("") == []


def test_valid_student_rows():
    text = STUDENT_HEADER + "\nAsha;TE;31001;5;K5;ML;S1;pw1\nBilal;TE;31002;6;N6;AI;S2;pw2\n"

    result = validate_csv(text, "student")

    assert result.valid
    assert result.errors == []
    assert [r["sId"] for r in result.rows] == ["S1", "S2"]


def test_batch_must_belong_to_division():
    text = STUDENT_HEADER + "\nAsha;TE;31001;5;K6;ML;S1;pw1\n"

    result = validate_csv(text, "student")

    assert not result.valid
    assert result.errors == [
        "Row 2: Invalid batch 'K6' for division 5. Valid batches for division 5: K5, L5, M5, N5"
    ]


def test_unknown_division_and_missing_values_are_all_reported():
    text = STUDENT_HEADER + "\nAsha;TE;31001;7;K5;ML;S1;pw1\n;TE;31002;5;K5;ML;S2;\n"

    result = validate_csv(text, "student")

    assert result.errors == [
        "Row 2: Invalid division '7'. Must be one of 5, 6",
        "Row 3: Missing value for studentName",
        "Row 3: Missing value for sPassword",
    ]


def test_missing_columns():
    result = validate_csv("studentName,sId\nAsha,S1\n", "student")

    assert not result.valid
    assert result.errors[0] == (
        "Missing required columns: studyingYear, rollNo, division, batch, electiveSubject, sPassword"
    )


def test_faculty_email_format():
    text = FACULTY_HEADER + "\nDr. Rao,Professor,rao-at-pict,DBMS,E1,pw\nDr. Iyer,Professor,iyer@pict.edu,OS,E2,pw\n"

    result = validate_csv(text, "faculty")

    assert result.errors == ["Row 2: Invalid email format for emailID"]


def test_empty_input_is_invalid():
    result = validate_rows([], "faculty")

    assert not result.valid
    assert result.errors == ["CSV file is empty or invalid"]


STUDENT_ROWS = [
    {
        "studentName": "Asha Kulkarni",
        "studyingYear": "TE",
        "rollNo": "31001",
        "division": "5",
        "batch": "K5",
        "electiveSubject": "ML",
        "sId": "S1",
        "sPassword": "pw1",
    },
    {
        "studentName": "Bilal Shaikh",
        "studyingYear": "TE",
        "rollNo": "31042",
        "division": "6",
        "batch": "N6",
        "electiveSubject": "Cloud",
        "sId": "S2",
        "sPassword": "pw2",
    },
]
FACULTY_ROWS = [
    {
        "name": "Dr. Rao",
        "designation": "Associate Professor",
        "emailID": "rao@faculty.pict.edu",
        "subject": "DBMS",
        "E_ID": "E1",
        "E_password": "secret",
    },
]


def _render(rows, separator: str) -> str:
    lines = [separator.join(rows[0])] + [separator.join(row.values()) for row in rows]
    return "\n".join(lines) + "\n"


@pytest.mark.parametrize("separator", [",", ";"])
@pytest.mark.parametrize("kind, rows", [("student", STUDENT_ROWS), ("faculty", FACULTY_ROWS)])
def test_rows_match_source_values_for_either_separator(separator, kind, rows):
    text = _render(rows, separator)

    assert parse_csv(text) == rows
    result = validate_csv(text, kind)
    assert result.valid, result.errors
    assert result.rows == rows
