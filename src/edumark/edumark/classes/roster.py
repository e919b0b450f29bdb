from __future__ import annotations

from typing import Sequence

from ..users.model import Student
from ..users.repository import UserRepository
from .model import Batch, CourseClass, Division


def roster_by_grouping(course: CourseClass, users: UserRepository) -> list[Student]:
    """Approved students whose division (lecture) or batch (lab) matches the class."""

    if isinstance(course.kind, Division):
        return list(users.get_students(division=course.kind.code, approved=True))
    if isinstance(course.kind, Batch):
        return list(users.get_students(batch=course.kind.code, approved=True))
    return []


def resolve_roster(course: CourseClass, users: UserRepository) -> list[Student]:
    """Explicit roster when the class has one, otherwise the grouping match."""

    if not course.students:
        return roster_by_grouping(course, users)
    wanted = set(course.students)
    return [s for s in users.get_students(approved=True) if s.user_id in wanted]


def sibling_offerings(target: CourseClass, candidates: Sequence[CourseClass]) -> list[CourseClass]:
    """Classes merged into one report with ``target``; never empty."""

    matches = [c for c in candidates if c.same_offering(target)]
    if not any(c.class_id == target.class_id for c in matches):
        matches.insert(0, target)
    return matches
