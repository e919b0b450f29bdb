from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ..core.enums import ClassType


@dataclass(frozen=True)
class Division:
    """Lecture grouping: the whole division attends."""

    code: str

    @property
    def label(self) -> str:
        return f"Division {self.code}"


@dataclass(frozen=True)
class Batch:
    """Lab grouping: one batch of a division attends."""

    code: str

    @property
    def label(self) -> str:
        return f"Batch {self.code}"


ClassKind = Union[Division, Batch]


def class_kind_from(class_type: ClassType | str, *, division: Optional[str], batch: Optional[str]) -> ClassKind:
    """Build the tagged grouping from storage columns, rejecting rows that break the XOR rule."""

    class_type = ClassType(class_type)
    if class_type == ClassType.CLASS:
        if not division or batch:
            raise ValueError("a lecture class needs a division and no batch")
        return Division(str(division))
    if not batch or division:
        raise ValueError("a lab needs a batch and no division")
    return Batch(str(batch))


@dataclass(frozen=True)
class CourseClass:
    """Domain entity: one class or lab taught by a faculty member.

    ``students`` is the explicit roster; when empty the roster is derived by
    matching ``kind`` against student division/batch.
    """

    class_id: str
    name: str
    code: str
    subject: str
    kind: ClassKind
    faculty_id: str
    faculty_name: str = ""
    department: str = ""
    year: str = ""
    semester: str = ""
    room: Optional[str] = None
    students: tuple[str, ...] = field(default_factory=tuple)
    total_sessions: int = 0
    is_active: bool = True

    @property
    def type(self) -> ClassType:
        return ClassType.CLASS if isinstance(self.kind, Division) else ClassType.LAB

    @property
    def division(self) -> Optional[str]:
        return self.kind.code if isinstance(self.kind, Division) else None

    @property
    def batch(self) -> Optional[str]:
        return self.kind.code if isinstance(self.kind, Batch) else None

    def same_offering(self, other: "CourseClass") -> bool:
        """Same faculty, subject and grouping: these are merged into one report."""

        return (
            self.faculty_id == other.faculty_id
            and self.subject == other.subject
            and self.kind == other.kind
        )

    def enrolls(self, student) -> bool:
        if self.students:
            return student.user_id in self.students
        if isinstance(self.kind, Division):
            return student.division == self.kind.code
        return student.batch == self.kind.code
