from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import current_semester, now_local
from ..common.validators import require_non_empty
from ..core.constants import BATCHES_BY_DIVISION, DEFAULT_DEPARTMENT, DIVISIONS, SEMESTERS, YEARS
from ..core.enums import ClassType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Actor
from ..users.repository import UserRepository
from .model import Batch, ClassKind, CourseClass, Division, class_kind_from
from .repository import ClassRepository
from .roster import roster_by_grouping

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "code", "subject", "department", "year", "semester", "room")
_ALL_BATCHES = frozenset(b for batches in BATCHES_BY_DIVISION.values() for b in batches)


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Only administrators can manage classes")


def _kind(class_type: ClassType | str, division: Optional[str], batch: Optional[str]) -> ClassKind:
    try:
        kind = class_kind_from(class_type, division=division or None, batch=batch or None)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if isinstance(kind, Division) and kind.code not in DIVISIONS:
        raise ValidationError(f"Unknown division {kind.code}")
    if isinstance(kind, Batch) and kind.code not in _ALL_BATCHES:
        raise ValidationError(f"Unknown batch {kind.code}")
    return kind


def _check_course(course: CourseClass) -> CourseClass:
    errors = []
    for name in ("name", "code", "subject"):
        if not str(getattr(course, name) or "").strip():
            errors.append(f"{name} is required")
    if course.year not in YEARS:
        errors.append(f"year must be one of {', '.join(YEARS)}")
    if course.semester not in SEMESTERS:
        errors.append(f"semester must be one of {', '.join(SEMESTERS)}")
    if errors:
        raise ValidationError("Invalid class", errors)
    return course


class ClassService:
    """Use cases: create and edit classes, assign faculty, manage explicit rosters.

    Every mutation is admin-only. Deleting a class deactivates it so its
    sessions keep a parent.
    """

    def __init__(self, classes: ClassRepository, users: UserRepository):
        self._classes = classes
        self._users = users

    def get_class(self, class_id: str) -> CourseClass:
        course = self._classes.get_by_id(class_id)
        if not course:
            raise NotFoundError(f"Class {class_id} not found")
        return course

    def list_classes(self, actor: Actor) -> list[CourseClass]:
        if actor.is_admin:
            return list(self._classes.list_active())
        if actor.is_faculty:
            return list(self._classes.list_for_faculty(actor.user_id))
        student = self._users.get_student(actor.user_id)
        if not student:
            raise NotFoundError(f"Student {actor.user_id} not found")
        return [c for c in self._classes.list_active() if c.enrolls(student)]

    def _faculty_name(self, faculty_id: str) -> str:
        faculty = self._users.get_faculty(require_non_empty(faculty_id, "faculty_id"))
        if not faculty:
            raise NotFoundError(f"Faculty {faculty_id} not found")
        return faculty.name

    def _known_students(self, student_ids: Iterable[str]) -> tuple[str, ...]:
        wanted = list(dict.fromkeys(str(s) for s in student_ids))
        unknown = [sid for sid in wanted if self._users.get_student(sid) is None]
        if unknown:
            raise ValidationError("Unknown students", [f"Unknown student {sid}" for sid in unknown])
        return tuple(wanted)

    def create_class(
        self,
        actor: Actor,
        *,
        name: str,
        code: str,
        subject: str,
        class_type: ClassType | str,
        faculty_id: str,
        year: str,
        division: Optional[str] = None,
        batch: Optional[str] = None,
        department: str = DEFAULT_DEPARTMENT,
        semester: Optional[str] = None,
        room: Optional[str] = None,
        students: Iterable[str] = (),
        today: Optional[date] = None,
    ) -> CourseClass:
        _require_admin(actor)
        try:
            class_type = ClassType(class_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown class type {class_type}") from exc

        course = _check_course(
            CourseClass(
                class_id=uuid.uuid4().hex,
                name=str(name or "").strip(),
                code=str(code or "").strip(),
                subject=str(subject or "").strip(),
                kind=_kind(class_type, division, batch),
                faculty_id=faculty_id,
                faculty_name=self._faculty_name(faculty_id),
                department=department or DEFAULT_DEPARTMENT,
                year=year,
                semester=semester or current_semester(today or now_local().date()),
                room=room or None,
                students=self._known_students(students),
            )
        )
        self._classes.add(course)
        logger.info("Class %s (%s) created by %s", course.class_id, course.code, actor.user_id)
        return course

    def update_class(self, actor: Actor, class_id: str, changes: Mapping[str, object]) -> CourseClass:
        """Edit descriptive fields and, optionally, the grouping.

        Faculty and roster changes go through their own operations.
        """

        _require_admin(actor)
        course = self.get_class(class_id)

        unknown = sorted(set(changes) - set(_EDITABLE_FIELDS) - {"class_type", "division", "batch"})
        if unknown:
            raise ValidationError("Fields cannot be changed here", [f"Unknown field {f}" for f in unknown])

        fields = {k: changes[k] for k in _EDITABLE_FIELDS if k in changes}
        if {"class_type", "division", "batch"} & set(changes):
            fields["kind"] = _kind(
                changes.get("class_type", course.type),
                changes.get("division", course.division),
                changes.get("batch", course.batch),
            )

        updated = _check_course(dataclasses.replace(course, **fields))
        self._classes.save(updated)
        logger.info("Class %s updated by %s: %s", class_id, actor.user_id, ", ".join(sorted(fields)))
        return updated

    def assign_faculty(self, actor: Actor, class_id: str, faculty_id: str) -> CourseClass:
        _require_admin(actor)
        course = self.get_class(class_id)
        updated = dataclasses.replace(course, faculty_id=faculty_id, faculty_name=self._faculty_name(faculty_id))
        self._classes.save(updated)
        logger.info("Class %s assigned to faculty %s", class_id, faculty_id)
        return updated

    def add_students(self, actor: Actor, class_id: str, student_ids: Iterable[str]) -> CourseClass:
        _require_admin(actor)
        course = self.get_class(class_id)
        added = self._known_students(student_ids)
        roster = tuple(dict.fromkeys(course.students + added))
        updated = dataclasses.replace(course, students=roster)
        self._classes.save(updated)
        logger.info("Class %s roster now has %d student(s)", class_id, len(roster))
        return updated

    def remove_students(self, actor: Actor, class_id: str, student_ids: Iterable[str]) -> CourseClass:
        _require_admin(actor)
        course = self.get_class(class_id)
        dropped = set(student_ids)
        updated = dataclasses.replace(course, students=tuple(s for s in course.students if s not in dropped))
        self._classes.save(updated)
        logger.info("Class %s roster now has %d student(s)", class_id, len(updated.students))
        return updated

    def auto_enroll(self, actor: Actor, class_id: str) -> CourseClass:
        """Replace the explicit roster with every approved student of the grouping.

        Students are further narrowed to the class's department and year when
        those are set.
        """

        _require_admin(actor)
        course = self.get_class(class_id)
        students = [
            s
            for s in roster_by_grouping(course, self._users)
            if (not course.department or s.department == course.department)
            and (not course.year or s.year == course.year)
        ]
        updated = dataclasses.replace(course, students=tuple(s.user_id for s in students))
        self._classes.save(updated)
        logger.info("Auto-enrolled %d student(s) into class %s", len(students), class_id)
        return updated

    def deactivate_class(self, actor: Actor, class_id: str) -> CourseClass:
        _require_admin(actor)
        updated = dataclasses.replace(self.get_class(class_id), is_active=False)
        self._classes.save(updated)
        logger.info("Class %s deactivated by %s", class_id, actor.user_id)
        return updated
