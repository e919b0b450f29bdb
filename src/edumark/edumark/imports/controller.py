from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, handle_errors, login_required
from ..common.serialization import to_jsonable
from ..core.enums import CsvRowKind
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container

_PASSWORD_COLUMNS = frozenset({"sPassword", "E_password"})


def _uploaded_text() -> str:
    """CSV text from a multipart ``file`` field or the raw request body."""

    upload = request.files.get("file")
    if upload is not None:
        return upload.read().decode("utf-8-sig", errors="replace")
    return request.get_data(as_text=True)


def _row_kind(value: str | None) -> CsvRowKind:
    try:
        return CsvRowKind(value or "")
    except ValueError as exc:
        raise ValidationError("kind must be 'student' or 'faculty'") from exc


def register(app: Flask, container: Container) -> None:
    @app.route("/api/imports/validate", methods=["POST"], endpoint="validate_import")
    @login_required
    @handle_errors
    def validate_import():
        if not current_actor().is_admin:
            raise AuthorizationError("Only admins can upload users")

        kind = _row_kind(request.args.get("kind"))
        result = container.import_service.validate(_uploaded_text(), kind)
        body = {"valid": result.valid, "errors": result.errors}
        if result.valid:
            body["rows"] = [
                {k: v for k, v in row.items() if k not in _PASSWORD_COLUMNS} for row in result.rows
            ]
        return jsonify(body)

    @app.route("/api/imports/<kind>", methods=["POST"], endpoint="run_import")
    @login_required
    @handle_errors
    def run_import(kind: str):
        if not current_actor().is_admin:
            raise AuthorizationError("Only admins can upload users")

        result = container.import_service.import_csv(_uploaded_text(), _row_kind(kind))
        return jsonify({"success": True, "result": to_jsonable(result)})
