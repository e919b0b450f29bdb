from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import CourseClass, class_kind_from
from .repository import ClassRepository

_COLUMNS = """
    c.class_id, c.name, c.code, c.subject, c.class_type, c.division, c.batch,
    c.faculty_id, c.faculty_name, c.department, c.year, c.semester, c.room,
    c.total_sessions, c.is_active
"""


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_rosters(self, cur, class_ids: list[str]) -> dict[str, tuple[str, ...]]:
        if not class_ids:
            return {}
        cur.execute(
            f"""
            SELECT class_id, student_id
            FROM class_students
            WHERE class_id IN ({placeholders(len(class_ids))})
            ORDER BY class_id, student_id
            """,
            tuple(class_ids),
        )
        rosters: dict[str, list[str]] = {}
        for r in fetchall(cur):
            rosters.setdefault(str(r["class_id"]), []).append(str(r["student_id"]))
        return {k: tuple(v) for k, v in rosters.items()}

    def _build(self, cur, rows: list[dict]) -> list[CourseClass]:
        rosters = self._load_rosters(cur, [str(r["class_id"]) for r in rows])
        return [
            CourseClass(
                class_id=str(r["class_id"]),
                name=r["name"],
                code=r["code"],
                subject=r["subject"],
                kind=class_kind_from(r["class_type"], division=r.get("division"), batch=r.get("batch")),
                faculty_id=str(r["faculty_id"]),
                faculty_name=r.get("faculty_name") or "",
                department=r.get("department") or "",
                year=r.get("year") or "",
                semester=r.get("semester") or "",
                room=r.get("room"),
                students=rosters.get(str(r["class_id"]), ()),
                total_sessions=int(r.get("total_sessions") or 0),
                is_active=bool(r.get("is_active", 1)),
            )
            for r in rows
        ]

    def get_by_id(self, class_id: str) -> Optional[CourseClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes c WHERE c.class_id=%s", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            return self._build(cur, [r])[0]

    def list_for_faculty(self, faculty_id: str, *, active_only: bool = True) -> Sequence[CourseClass]:
        sql = f"SELECT {_COLUMNS} FROM classes c WHERE c.faculty_id=%s"
        if active_only:
            sql += " AND c.is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY c.name", (faculty_id,))
            return self._build(cur, fetchall(cur))

    def list_active(self) -> Sequence[CourseClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes c WHERE c.is_active=1 ORDER BY c.name")
            return self._build(cur, fetchall(cur))

    def increment_session_count(self, class_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET total_sessions = total_sessions + 1 WHERE class_id=%s",
                (class_id,),
            )

    def _replace_roster(self, cur, course: CourseClass) -> None:
        cur.execute("DELETE FROM class_students WHERE class_id=%s", (course.class_id,))
        if course.students:
            cur.executemany(
                "INSERT INTO class_students(class_id, student_id) VALUES(%s,%s)",
                [(course.class_id, sid) for sid in course.students],
            )

    def add(self, course: CourseClass) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(
                    class_id, name, code, subject, class_type, division, batch,
                    faculty_id, faculty_name, department, year, semester, room,
                    total_sessions, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    course.class_id,
                    course.name,
                    course.code,
                    course.subject,
                    course.type.value,
                    course.division,
                    course.batch,
                    course.faculty_id,
                    course.faculty_name,
                    course.department,
                    course.year,
                    course.semester,
                    course.room,
                    course.total_sessions,
                    1 if course.is_active else 0,
                ),
            )
            self._replace_roster(cur, course)
        return course.class_id

    def save(self, course: CourseClass) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE classes SET
                    name=%s, code=%s, subject=%s, class_type=%s, division=%s, batch=%s,
                    faculty_id=%s, faculty_name=%s, department=%s, year=%s, semester=%s,
                    room=%s, is_active=%s
                WHERE class_id=%s
                """,
                (
                    course.name,
                    course.code,
                    course.subject,
                    course.type.value,
                    course.division,
                    course.batch,
                    course.faculty_id,
                    course.faculty_name,
                    course.department,
                    course.year,
                    course.semester,
                    course.room,
                    1 if course.is_active else 0,
                    course.class_id,
                ),
            )
            self._replace_roster(cur, course)
