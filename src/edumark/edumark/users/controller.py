from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, handle_errors, login_required
from ..common.serialization import to_jsonable
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users/pending", methods=["GET"], endpoint="pending_users")
    @login_required
    @handle_errors
    def pending_users():
        return jsonify({"users": to_jsonable(container.user_service.pending_users(current_actor()))})

    @app.route("/api/users/<user_id>/approval", methods=["POST"], endpoint="set_user_approval")
    @login_required
    @handle_errors
    def set_user_approval(user_id: str):
        data = request.get_json(silent=True) or {}
        approved = data.get("approved", True)
        if not isinstance(approved, bool):
            raise ValidationError("approved must be true or false")

        container.user_service.set_approval(current_actor(), user_id, approved=approved)
        return jsonify({"success": True, "user_id": user_id, "approved": approved})
