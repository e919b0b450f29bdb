from __future__ import annotations

import dataclasses

import pytest

from src.edumark.edumark.classes.roster import resolve_roster
from src.edumark.edumark.core.enums import Role
from src.edumark.edumark.core.exceptions import AuthorizationError, NotFoundError
from src.edumark.edumark.users.model import Faculty
from src.edumark.edumark.users.service import UserService
from tests.fakes import ADMIN, FACULTY, InMemoryUsers, lecture, student


def _users():
    return InMemoryUsers(
        students=[student("s1", "Asha"), dataclasses.replace(student("s2", "Bilal"), approved=False)],
        faculty=[Faculty(user_id="fac-1", name="Prof. Rao", employee_id="E1")],
    )


def test_pending_users_lists_unapproved_accounts():
    service = UserService(_users())

    pending = service.pending_users(ADMIN)

    assert [(p.user_id, p.name, p.role) for p in pending] == [("s2", "Bilal", Role.STUDENT)]


def test_approving_a_student_adds_them_to_rosters():
    users = _users()
    service = UserService(users)
    assert [s.user_id for s in resolve_roster(lecture("c1"), users)] == ["s1"]

    service.set_approval(ADMIN, "s2")

    assert service.pending_users(ADMIN) == []
    assert [s.user_id for s in resolve_roster(lecture("c1"), users)] == ["s1", "s2"]


def test_revoking_approval_returns_account_to_the_queue():
    users = _users()
    service = UserService(users)

    service.set_approval(ADMIN, "s1", approved=False)

    assert [p.user_id for p in service.pending_users(ADMIN)] == ["s1", "s2"]


def test_approval_is_admin_only_and_checks_the_user():
    service = UserService(_users())

    with pytest.raises(AuthorizationError):
        service.pending_users(FACULTY)
    with pytest.raises(AuthorizationError):
        service.set_approval(FACULTY, "s2")
    with pytest.raises(NotFoundError):
        service.set_approval(ADMIN, "ghost")
