from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_actor, handle_errors, login_required
from ..common.serialization import to_jsonable
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/attendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    @handle_errors
    def mark_attendance(class_id: str):
        data = request.get_json(silent=True) or {}
        try:
            session_date = parse_iso_date(str(data.get("date", "")))
            duration = int(data.get("duration") or 0)
        except ValueError as exc:
            raise ValidationError("date must be YYYY-MM-DD and duration a number of minutes") from exc

        marks = data.get("marks") or {}
        if not isinstance(marks, dict):
            raise ValidationError("marks must map student ids to statuses")

        session_obj = container.attendance_service.mark_attendance(
            current_actor(),
            class_id=class_id,
            session_date=session_date,
            topic=str(data.get("topic", "")),
            duration=duration,
            marks=marks,
            remarks=data.get("remarks") or {},
        )
        return (
            jsonify(
                {
                    "success": True,
                    "session_id": session_obj.session_id,
                    "session_number": session_obj.session_number,
                    "present_count": session_obj.present_count,
                    "absent_count": session_obj.absent_count,
                    "late_count": session_obj.late_count,
                    "total_students": session_obj.total_students,
                }
            ),
            201,
        )

    @app.route("/api/students/<student_id>/attendance", methods=["GET"], endpoint="student_attendance")
    @login_required
    @handle_errors
    def student_attendance(student_id: str):
        summaries = container.attendance_service.student_attendance(current_actor(), student_id)
        return jsonify({"classes": to_jsonable(summaries)})
