from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, handle_errors, login_required, optional_date_arg
from ..common.serialization import to_jsonable
from ..core.constants import MINIMUM_ATTENDANCE
from ..core.exceptions import ValidationError
from ..container import Container
from .export import export_class_report_csv, export_filename


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/classes/<class_id>", methods=["GET"], endpoint="class_report")
    @login_required
    @handle_errors
    def class_report(class_id: str):
        report = container.report_service.class_report(
            current_actor(),
            class_id,
            start=optional_date_arg("start"),
            end=optional_date_arg("end"),
        )
        return jsonify(to_jsonable(report))

    @app.route("/api/reports/classes/<class_id>/export", methods=["GET"], endpoint="class_report_csv")
    @login_required
    @handle_errors
    def class_report_csv(class_id: str):
        report = container.report_service.class_report(
            current_actor(),
            class_id,
            start=optional_date_arg("start"),
            end=optional_date_arg("end"),
        )
        return app.response_class(
            export_class_report_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export_filename(report)}"},
        )

    @app.route("/api/reports/students/<student_id>", methods=["GET"], endpoint="student_report")
    @login_required
    @handle_errors
    def student_report(student_id: str):
        report = container.report_service.student_report(
            current_actor(),
            student_id,
            start=optional_date_arg("start"),
            end=optional_date_arg("end"),
        )
        return jsonify(to_jsonable(report))

    @app.route("/api/reports/faculty/<faculty_id>", methods=["GET"], endpoint="faculty_report")
    @login_required
    @handle_errors
    def faculty_report(faculty_id: str):
        report = container.report_service.faculty_report(
            current_actor(),
            faculty_id,
            start=optional_date_arg("start"),
            end=optional_date_arg("end"),
        )
        return jsonify(to_jsonable(report))

    @app.route("/api/reports/admin", methods=["GET"], endpoint="admin_report")
    @login_required
    @handle_errors
    def admin_report():
        report = container.report_service.admin_report(
            current_actor(),
            start=optional_date_arg("start"),
            end=optional_date_arg("end"),
        )
        return jsonify(to_jsonable(report))

    @app.route("/api/reports/low-attendance", methods=["GET"], endpoint="low_attendance")
    @login_required
    @handle_errors
    def low_attendance():
        try:
            threshold = int(request.args.get("threshold") or app.config.get("MINIMUM_ATTENDANCE", MINIMUM_ATTENDANCE))
        except ValueError as exc:
            raise ValidationError("threshold must be a whole number") from exc

        rows = container.report_service.low_attendance_students(
            current_actor(),
            threshold=threshold,
            class_id=request.args.get("class_id") or None,
        )
        return jsonify({"threshold": threshold, "students": to_jsonable(rows)})

    @app.route("/api/reports/trends", methods=["GET"], endpoint="attendance_trends")
    @login_required
    @handle_errors
    def attendance_trends():
        points = container.report_service.attendance_trends(
            current_actor(),
            period=request.args.get("period") or "weekly",
            class_id=request.args.get("class_id") or None,
            faculty_id=request.args.get("faculty_id") or None,
        )
        return jsonify({"trends": to_jsonable(points)})
