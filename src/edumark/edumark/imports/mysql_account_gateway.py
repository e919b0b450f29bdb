from __future__ import annotations

import logging
import uuid

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .gateway import AccountGateway, AccountRequest

logger = logging.getLogger(__name__)

_ID_COLUMN = {Role.STUDENT: "student_id", Role.FACULTY: "employee_id"}


class MySQLAccountGateway(AccountGateway):
    """Creates imported accounts directly in the users table (pre-approved)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace_account(self, request: AccountRequest) -> str:
        role = Role(request.role)
        column = _ID_COLUMN[role]
        user_id = uuid.uuid4().hex
        profile = request.profile
        password_hash = generate_password_hash(request.password)

        # One transaction: db_cursor rolls the delete back if the insert fails.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM users WHERE role=%s AND {column}=%s", (role.value, request.external_id))
            removed = int(cur.rowcount)
            cur.execute(
                """
                INSERT INTO users(
                    user_id, name, email, role, password_hash, approved,
                    student_id, roll_no, division, batch, department, year, elective_subject,
                    employee_id, designation, subject
                )
                VALUES(%s,%s,%s,%s,%s,1,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    request.name,
                    request.email,
                    role.value,
                    password_hash,
                    request.external_id if role == Role.STUDENT else None,
                    profile.get("roll_no"),
                    profile.get("division"),
                    profile.get("batch"),
                    profile.get("department"),
                    profile.get("year"),
                    profile.get("elective_subject"),
                    request.external_id if role == Role.FACULTY else None,
                    profile.get("designation"),
                    profile.get("subject"),
                ),
            )
        if removed:
            logger.info("Replaced %d existing account(s) for %s", removed, request.external_id)
        return user_id
