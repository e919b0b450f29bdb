from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import AttendanceRecord, AttendanceSession
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_sessions(
        self,
        *,
        class_id: Optional[str] = None,
        faculty_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceSession]:
        clauses = ["1=1"]
        params: list[object] = []
        if class_id is not None:
            clauses.append("s.class_id=%s")
            params.append(class_id)
        elif faculty_id is not None:
            clauses.append("s.faculty_id=%s")
            params.append(faculty_id)
        if start is not None:
            clauses.append("s.session_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("s.session_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.class_id, s.class_name, s.class_code,
                    s.faculty_id, s.faculty_name, s.session_date, s.session_number,
                    s.topic, s.duration, s.total_students,
                    s.present_count, s.absent_count, s.late_count
                FROM attendance_sessions s
                WHERE {where}
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [str(r["session_id"]) for r in rows]
            cur.execute(
                f"""
                SELECT session_id, student_id, student_name, status, remarks
                FROM attendance_records
                WHERE session_id IN ({placeholders(len(ids))})
                ORDER BY session_id, student_name
                """,
                tuple(ids),
            )
            records: dict[str, list[AttendanceRecord]] = {}
            for r in fetchall(cur):
                records.setdefault(str(r["session_id"]), []).append(
                    AttendanceRecord(
                        student_id=str(r["student_id"]),
                        student_name=r.get("student_name") or "",
                        status=AttendanceStatus(r["status"]),
                        remarks=r.get("remarks"),
                    )
                )

            return [
                AttendanceSession(
                    session_id=str(r["session_id"]),
                    class_id=str(r["class_id"]),
                    faculty_id=str(r["faculty_id"]),
                    session_date=r.get("session_date"),
                    session_number=int(r["session_number"]),
                    topic=r.get("topic") or "",
                    duration=int(r.get("duration") or 0),
                    records=tuple(records.get(str(r["session_id"]), ())),
                    total_students=int(r["total_students"]),
                    present_count=int(r["present_count"]),
                    absent_count=int(r["absent_count"]),
                    late_count=int(r["late_count"]),
                    class_name=r.get("class_name") or "",
                    class_code=r.get("class_code") or "",
                    faculty_name=r.get("faculty_name") or "",
                )
                for r in rows
            ]

    def next_session_number(self, class_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COALESCE(MAX(session_number), 0) AS n FROM attendance_sessions WHERE class_id=%s",
                (class_id,),
            )
            r = fetchone(cur)
            return int(r["n"]) + 1 if r else 1

    def exists_for_date(self, class_id: str, session_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS hit FROM attendance_sessions WHERE class_id=%s AND session_date=%s LIMIT 1",
                (class_id, session_date),
            )
            return fetchone(cur) is not None

    def add_session(self, session: AttendanceSession) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    session_id, class_id, class_name, class_code, faculty_id, faculty_name,
                    session_date, session_number, topic, duration,
                    total_students, present_count, absent_count, late_count
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    session.class_id,
                    session.class_name,
                    session.class_code,
                    session.faculty_id,
                    session.faculty_name,
                    session.session_date,
                    session.session_number,
                    session.topic,
                    session.duration,
                    session.total_students,
                    session.present_count,
                    session.absent_count,
                    session.late_count,
                ),
            )
            if session.records:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(session_id, student_id, student_name, status, remarks)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [
                        (session.session_id, r.student_id, r.student_name, r.status.value, r.remarks)
                        for r in session.records
                    ],
                )
            return session.session_id
