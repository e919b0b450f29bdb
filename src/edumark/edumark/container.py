from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .core.constants import (
    DEFAULT_IMPORT_BASE_DELAY_SECONDS,
    DEFAULT_IMPORT_MAX_RETRIES,
    DEFAULT_IMPORT_ROW_DELAY_SECONDS,
    MINIMUM_ATTENDANCE,
)
from .database.connection import DBConfig, DatabaseConnection
from .imports.gateway import AccountGateway
from .imports.mysql_account_gateway import MySQLAccountGateway
from .imports.retry.exponential_backoff import ExponentialBackoff
from .imports.service import CsvImportService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classes_repo: ClassRepository
    attendance_repo: AttendanceRepository
    account_gateway: AccountGateway

    attendance_service: AttendanceService
    report_service: ReportService
    import_service: CsvImportService
    class_service: ClassService
    user_service: UserService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    attendance_repo: AttendanceRepository,
    account_gateway: AccountGateway,
    import_service: Optional[CsvImportService] = None,
    conn: Optional[DatabaseConnection] = None,
    minimum_attendance: int = MINIMUM_ATTENDANCE,
) -> Container:
    return Container(
        users_repo=users_repo,
        classes_repo=classes_repo,
        attendance_repo=attendance_repo,
        account_gateway=account_gateway,
        attendance_service=AttendanceService(attendance_repo, classes_repo, users_repo),
        report_service=ReportService(
            attendance_repo, classes_repo, users_repo, minimum_attendance=minimum_attendance
        ),
        import_service=import_service or CsvImportService(account_gateway),
        class_service=ClassService(classes_repo, users_repo),
        user_service=UserService(users_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    import_settings: Optional[dict] = None,
    minimum_attendance: int = MINIMUM_ATTENDANCE,
) -> Container:
    import_settings = import_settings or {}
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    gateway = MySQLAccountGateway(conn)
    import_service = CsvImportService(
        gateway,
        retry_policy=ExponentialBackoff(
            max_attempts=int(import_settings.get("max_retries", DEFAULT_IMPORT_MAX_RETRIES)),
            base_delay=float(import_settings.get("base_delay", DEFAULT_IMPORT_BASE_DELAY_SECONDS)),
        ),
        row_delay=float(import_settings.get("row_delay", DEFAULT_IMPORT_ROW_DELAY_SECONDS)),
    )

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        account_gateway=gateway,
        import_service=import_service,
        conn=conn,
        minimum_attendance=minimum_attendance,
    )
