from __future__ import annotations

import csv
import io

from .model import ClassReport

STUDENT_COLUMNS = [
    "Student Name",
    "Student ID",
    "Roll No",
    "Total Sessions",
    "Present",
    "Late",
    "Absent",
    "Attendance %",
]


def export_class_report_csv(report: ClassReport) -> bytes:
    """Header block followed by one row per student.

    Encoded as UTF-8 with BOM so spreadsheet apps pick the right charset.
    """

    out = io.StringIO()
    writer = csv.writer(out)

    writer.writerow([f"Subject: {report.subject}"])
    writer.writerow([report.group_label])
    if report.total_classes > 1:
        writer.writerow([f"Combined data from {report.total_classes} class instances"])
    writer.writerow([f"Total Sessions: {report.total_sessions}"])
    writer.writerow([f"Average Attendance: {report.average_attendance}%"])
    writer.writerow([f"Session-weighted Attendance: {report.session_weighted_attendance}%"])
    writer.writerow([f"Report Generated: {report.generated_at.strftime('%Y-%m-%d')}"])
    writer.writerow([])

    writer.writerow(STUDENT_COLUMNS)
    for row in report.students:
        writer.writerow(
            [
                row.student.name,
                row.student.student_id,
                row.student.roll_no or "",
                row.stats.total_sessions,
                row.stats.present_sessions,
                row.stats.late_sessions,
                row.stats.absent_sessions,
                f"{row.stats.attendance_percentage}%",
            ]
        )

    return out.getvalue().encode("utf-8-sig")


def export_filename(report: ClassReport) -> str:
    subject = report.subject.replace(" ", "_") or report.class_code
    group = report.group_label.replace(" ", "_")
    return f"{subject}_{group}_attendance_report.csv"
