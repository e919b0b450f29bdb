from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Faculty, PendingUser, Student
from .repository import UserRepository

_STUDENT_COLUMNS = """
    user_id, name, email, student_id, roll_no, division, batch,
    department, year, elective_subject, approved
"""


def _to_student(r: dict) -> Student:
    return Student(
        user_id=str(r["user_id"]),
        name=r["name"],
        student_id=r.get("student_id") or "",
        roll_no=r.get("roll_no"),
        division=r.get("division"),
        batch=r.get("batch"),
        department=r.get("department"),
        year=r.get("year"),
        elective_subject=r.get("elective_subject"),
        email=r.get("email"),
        approved=bool(r.get("approved", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_student(self, user_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM users WHERE user_id=%s AND role='student'",
                (user_id,),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_faculty(self, user_id: str) -> Optional[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, email, employee_id, designation, subject
                FROM users
                WHERE user_id=%s AND role='faculty'
                """,
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Faculty(
                user_id=str(r["user_id"]),
                name=r["name"],
                employee_id=r.get("employee_id") or "",
                email=r.get("email"),
                designation=r.get("designation"),
                subject=r.get("subject"),
            )

    def get_students(
        self,
        *,
        division: Optional[str] = None,
        batch: Optional[str] = None,
        approved: bool = True,
    ) -> Sequence[Student]:
        clauses = ["role='student'", "approved=%s"]
        params: list[object] = [1 if approved else 0]
        if division is not None:
            clauses.append("division=%s")
            params.append(division)
        if batch is not None:
            clauses.append("batch=%s")
            params.append(batch)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM users WHERE {where} ORDER BY roll_no, name",
                tuple(params),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def count_faculty(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE role='faculty'")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_pending(self) -> Sequence[PendingUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, email, role
                FROM users
                WHERE approved=0
                ORDER BY created_at, name
                """
            )
            return [
                PendingUser(
                    user_id=str(r["user_id"]),
                    name=r["name"],
                    role=Role(r["role"]),
                    email=r.get("email"),
                )
                for r in fetchall(cur)
            ]

    def set_approved(self, user_id: str, approved: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (user_id,))
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE users SET approved=%s WHERE user_id=%s",
                (1 if approved else 0, user_id),
            )
            return True
