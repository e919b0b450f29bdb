from __future__ import annotations

import logging

from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Actor, PendingUser
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Only administrators can approve accounts")


class UserService:
    """Use case: the approval queue for self-registered accounts.

    Unapproved students are left out of every roster until approved.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def pending_users(self, actor: Actor) -> list[PendingUser]:
        _require_admin(actor)
        return list(self._users.list_pending())

    def set_approval(self, actor: Actor, user_id: str, *, approved: bool = True) -> None:
        _require_admin(actor)
        if not self._users.set_approved(user_id, approved):
            raise NotFoundError(f"User {user_id} not found")
        logger.info("User %s %s by %s", user_id, "approved" if approved else "unapproved", actor.user_id)
