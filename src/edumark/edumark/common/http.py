from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, UpstreamError, ValidationError
from ..users.model import Actor
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def current_actor() -> Actor:
    """Actor for this request, built from the session the sign-in flow established."""

    return Actor(
        user_id=str(session["user_id"]),
        role=Role(session["role"]),
        name=session.get("name", ""),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401
        try:
            Role(session["role"])
        except ValueError:
            return jsonify({"success": False, "message": "Unknown role"}), 403
        return view(*args, **kwargs)

    return wrapper


def optional_date_arg(name: str) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date") from exc


def handle_errors(view):
    """Map domain errors to JSON responses; anything unexpected is logged and becomes a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e), "errors": e.errors}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except UpstreamError as e:
            logger.error("Upstream failure in %s: %s", view.__name__, e)
            return jsonify({"success": False, "message": str(e)}), 502
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal server error"}), 500

    return wrapper
