from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, handle_errors, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import CourseClass

_CREATE_FIELDS = (
    "name",
    "code",
    "subject",
    "class_type",
    "faculty_id",
    "year",
    "division",
    "batch",
    "department",
    "semester",
    "room",
)


def _class_json(course: CourseClass) -> dict:
    return {
        "class_id": course.class_id,
        "name": course.name,
        "code": course.code,
        "subject": course.subject,
        "type": course.type.value,
        "division": course.division,
        "batch": course.batch,
        "faculty_id": course.faculty_id,
        "faculty_name": course.faculty_name,
        "department": course.department,
        "year": course.year,
        "semester": course.semester,
        "room": course.room,
        "students": list(course.students),
        "total_sessions": course.total_sessions,
        "is_active": course.is_active,
    }


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _student_ids(data: dict) -> list[str]:
    ids = data.get("student_ids")
    if not isinstance(ids, list) or not ids:
        raise ValidationError("student_ids must be a non-empty list")
    return [str(i) for i in ids]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    @login_required
    @handle_errors
    def list_classes():
        classes = container.class_service.list_classes(current_actor())
        return jsonify({"classes": [_class_json(c) for c in classes]})

    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    @login_required
    @handle_errors
    def create_class():
        data = _json_body()
        fields = {k: data.get(k) for k in _CREATE_FIELDS}
        course = container.class_service.create_class(
            current_actor(), students=data.get("student_ids") or (), **fields
        )
        return jsonify({"success": True, "class": _class_json(course)}), 201

    @app.route("/api/classes/<class_id>", methods=["GET"], endpoint="get_class")
    @login_required
    @handle_errors
    def get_class(class_id: str):
        return jsonify(_class_json(container.class_service.get_class(class_id)))

    @app.route("/api/classes/<class_id>", methods=["PATCH"], endpoint="update_class")
    @login_required
    @handle_errors
    def update_class(class_id: str):
        course = container.class_service.update_class(current_actor(), class_id, _json_body())
        return jsonify({"success": True, "class": _class_json(course)})

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="deactivate_class")
    @login_required
    @handle_errors
    def deactivate_class(class_id: str):
        container.class_service.deactivate_class(current_actor(), class_id)
        return jsonify({"success": True})

    @app.route("/api/classes/<class_id>/faculty", methods=["PUT"], endpoint="assign_faculty")
    @login_required
    @handle_errors
    def assign_faculty(class_id: str):
        faculty_id = str(_json_body().get("faculty_id") or "")
        course = container.class_service.assign_faculty(current_actor(), class_id, faculty_id)
        return jsonify({"success": True, "class": _class_json(course)})

    @app.route("/api/classes/<class_id>/students", methods=["POST"], endpoint="add_class_students")
    @login_required
    @handle_errors
    def add_students(class_id: str):
        course = container.class_service.add_students(current_actor(), class_id, _student_ids(_json_body()))
        return jsonify({"success": True, "students": list(course.students)})

    @app.route("/api/classes/<class_id>/students", methods=["DELETE"], endpoint="remove_class_students")
    @login_required
    @handle_errors
    def remove_students(class_id: str):
        course = container.class_service.remove_students(current_actor(), class_id, _student_ids(_json_body()))
        return jsonify({"success": True, "students": list(course.students)})

    @app.route("/api/classes/<class_id>/auto-enroll", methods=["POST"], endpoint="auto_enroll_class")
    @login_required
    @handle_errors
    def auto_enroll(class_id: str):
        course = container.class_service.auto_enroll(current_actor(), class_id)
        return jsonify({"success": True, "students": list(course.students)})
