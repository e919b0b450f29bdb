from __future__ import annotations

from datetime import date, datetime

from src.edumark.edumark.core.enums import ClassType
from src.edumark.edumark.reports.builder import build_class_report
from tests.fakes import lab, lecture, session, student

GENERATED = datetime(2024, 3, 1, 9, 0)


def test_merges_offerings_into_one_renumbered_timeline():
    target = lecture("c1")
    sibling = lecture("c2")
    sessions = [
        session("a2", "c1", date(2024, 1, 2), {"s1": "present"}, number=2),
        session("b1", "c2", date(2024, 1, 1), {"s1": "absent"}, number=1),
        session("a1", "c1", date(2024, 1, 3), {"s1": "present"}, number=1),
        session("b2", "c2", date(2024, 1, 5), {"s1": "late"}, number=2),
        session("b3", "c2", date(2024, 1, 4), {"s1": "present"}, number=3),
    ]

    report = build_class_report(target, [target, sibling], sessions, [student("s1", "Asha")], generated_at=GENERATED)

    assert report.total_classes == 2
    assert report.merged_class_ids == ("c1", "c2")
    assert report.total_sessions == 5
    assert [s.session_number for s in report.sessions] == [1, 2, 3, 4, 5]
    assert [s.session_date for s in report.sessions] == [
        date(2024, 1, 1),
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 4),
        date(2024, 1, 5),
    ]
    row = report.students[0]
    assert [e.session_number for e in row.sessions] == [1, 2, 3, 4, 5]
    assert row.stats.total_sessions == 5
    assert row.stats.attendance_percentage == 80


def test_empty_roster_and_sessions_give_zeros():
    report = build_class_report(lab("l1", batch="K5"), [], [], [], generated_at=GENERATED)

    assert report.total_sessions == 0
    assert report.total_students == 0
    assert report.average_attendance == 0
    assert report.session_weighted_attendance == 0
    assert report.class_type == ClassType.LAB
    assert report.group_label == "Batch K5"


def test_date_window_is_inclusive():
    target = lecture("c1")
    sessions = [
        session("a", "c1", date(2024, 1, 1), {"s1": "present"}),
        session("b", "c1", date(2024, 1, 10), {"s1": "present"}),
        session("c", "c1", date(2024, 1, 20), {"s1": "absent"}),
        session("d", "c1", date(2024, 1, 21), {"s1": "absent"}),
    ]

    report = build_class_report(
        target,
        [target],
        sessions,
        [student("s1", "Asha")],
        start=date(2024, 1, 10),
        end=date(2024, 1, 20),
        generated_at=GENERATED,
    )

    assert [s.session_date for s in report.sessions] == [date(2024, 1, 10), date(2024, 1, 20)]
    assert report.students[0].stats.attendance_percentage == 50


def test_unweighted_and_session_weighted_averages_differ():
    target = lecture("c1")
    # s1 attends 1 of 1, s2 attends 1 of 3.
    sessions = [
        session("a", "c1", date(2024, 1, 1), {"s1": "present", "s2": "present"}),
        session("b", "c1", date(2024, 1, 2), {"s2": "absent"}),
        session("c", "c1", date(2024, 1, 3), {"s2": "absent"}),
    ]

    report = build_class_report(
        target, [target], sessions, [student("s1", "Asha"), student("s2", "Bilal")], generated_at=GENERATED
    )

    assert report.average_attendance == 67
    assert report.session_weighted_attendance == 50


def test_students_sorted_lowest_percentage_first():
    target = lecture("c1")
    sessions = [
        session("a", "c1", date(2024, 1, 1), {"s1": "present", "s2": "absent", "s3": "absent"}),
    ]
    roster = [student("s1", "Asha"), student("s2", "Zoya"), student("s3", "Bilal")]

    report = build_class_report(target, [target], sessions, roster, generated_at=GENERATED)

    assert [r.student.name for r in report.students] == ["Bilal", "Zoya", "Asha"]


def test_session_overview_percentage_includes_late():
    target = lecture("c1")
    sessions = [session("a", "c1", date(2024, 1, 1), {"s1": "late", "s2": "absent"})]

    report = build_class_report(target, [target], sessions, [], generated_at=GENERATED)

    overview = report.sessions[0]
    assert (overview.present_count, overview.late_count, overview.absent_count) == (0, 1, 1)
    assert overview.attendance_percentage == 50
