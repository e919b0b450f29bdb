"""Example: call the service layer directly, without Flask.

Prints a class report and the low-attendance list for one class.
Usage: python examples/example_usage.py <class_id>
"""

import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.edumark.edumark.core.enums import Role
from src.edumark.edumark.container import build_container
from src.edumark.edumark.users.model import Actor


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    admin = Actor(user_id="example", role=Role.ADMIN, name="Example")

    class_id = sys.argv[1]
    report = container.report_service.class_report(admin, class_id)
    print(f"{report.subject} / {report.group_label}: {report.total_sessions} sessions, "
          f"{report.average_attendance}% average ({report.session_weighted_attendance}% session-weighted)")
    for row in container.report_service.low_attendance_students(admin, class_id=class_id):
        print(f"  {row.student_name}: {row.attendance_percentage}%")


if __name__ == "__main__":
    main()
