from __future__ import annotations

import dataclasses
import io
from datetime import date

import pytest

from src.edumark.edumark.container import wire_services
from src.edumark.edumark.imports.retry.no_retry import NoRetry
from src.edumark.edumark.imports.service import CsvImportService
from src.edumark.edumark.main import create_app
from src.edumark.edumark.users.model import Faculty
from tests.fakes import FakeGateway, InMemoryAttendance, InMemoryClasses, InMemoryUsers, lecture, session, student


@pytest.fixture()
def stores():
    users = InMemoryUsers(
        students=[
            student("s1", "Asha"),
            student("s2", "Bilal", batch="L5"),
            dataclasses.replace(student("s3", "Chen"), approved=False),
        ],
        faculty=[Faculty(user_id="fac-2", name="Prof. Iyer", employee_id="E2")],
    )
    classes = InMemoryClasses(classes=[lecture("c1"), lecture("c2")])
    attendance = InMemoryAttendance(
        [
            session("a", "c1", date(2024, 1, 1), {"s1": "present", "s2": "absent"}),
            session("b", "c2", date(2024, 1, 2), {"s1": "present", "s2": "present"}),
        ]
    )
    return users, classes, attendance, FakeGateway()


@pytest.fixture()
def client(monkeypatch, stores):
    monkeypatch.setenv("APP_ENV", "testing")
    users, classes, attendance, gateway = stores
    container = wire_services(
        users_repo=users,
        classes_repo=classes,
        attendance_repo=attendance,
        account_gateway=gateway,
        import_service=CsvImportService(gateway, retry_policy=NoRetry(), row_delay=0, sleep=lambda _: None),
    )
    app = create_app(container=container)
    return app.test_client()


def _login(client, user_id: str, role: str):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_reports_require_sign_in(client):
    resp = client.get("/api/reports/classes/c1")

    assert resp.status_code == 401


def test_class_report_json(client):
    _login(client, "fac-1", "faculty")

    resp = client.get("/api/reports/classes/c1?start=2024-01-01&end=2024-01-31")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["total_sessions"] == 2
    assert body["merged_class_ids"] == ["c1", "c2"]
    assert body["class_type"] == "class"
    assert body["sessions"][0]["session_date"] == "2024-01-01"
    assert body["start"] == "2024-01-01"


def test_class_report_csv_download(client):
    _login(client, "admin-1", "admin")

    resp = client.get("/api/reports/classes/c1/export")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    assert b"Combined data from 2 class instances" in resp.data


def test_error_mapping(client):
    _login(client, "fac-2", "faculty")
    assert client.get("/api/reports/classes/c1").status_code == 403
    assert client.get("/api/reports/classes/nope").status_code == 404

    resp = client.get("/api/reports/classes/c1?start=01-01-2024")
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["start must be a YYYY-MM-DD date"]


def test_mark_attendance_endpoint(client, stores):
    _, _, attendance, _ = stores
    _login(client, "fac-1", "faculty")

    resp = client.post(
        "/api/classes/c1/attendance",
        json={"date": "2024-01-08", "topic": "Joins", "duration": 60, "marks": {"s2": "late"}},
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert (body["present_count"], body["late_count"], body["total_students"]) == (1, 1, 2)
    assert len(attendance.sessions) == 3


def test_student_sees_own_attendance_only(client):
    _login(client, "s1", "student")

    resp = client.get("/api/students/s1/attendance")
    assert resp.status_code == 200
    assert [c["class_id"] for c in resp.get_json()["classes"]] == ["c1", "c2"]

    assert client.get("/api/students/s2/attendance").status_code == 403
    assert client.get("/api/reports/low-attendance").status_code == 403


def test_low_attendance_endpoint(client):
    _login(client, "admin-1", "admin")

    body = client.get("/api/reports/low-attendance?threshold=60").get_json()

    assert body["threshold"] == 60
    assert [(s["student_id"], s["class_id"]) for s in body["students"]] == [("s2", "c1")]


def test_import_validate_and_run(client, stores):
    _, _, _, gateway = stores
    _login(client, "admin-1", "admin")
    text = "name,designation,emailID,subject,E_ID,E_password\nDr. Rao,Professor,rao@pict.edu,DBMS,E1,pw\n"

    resp = client.post(
        "/api/imports/validate?kind=faculty",
        data={"file": (io.BytesIO(text.encode()), "faculty.csv")},
        content_type="multipart/form-data",
    )
    body = resp.get_json()
    assert body["valid"] is True
    assert body["rows"] == [{"name": "Dr. Rao", "designation": "Professor", "emailID": "rao@pict.edu", "subject": "DBMS", "E_ID": "E1"}]

    resp = client.post("/api/imports/faculty", data=text, content_type="text/csv")
    assert resp.status_code == 200
    assert resp.get_json()["result"] == {"success": 1, "errors": 0, "error_details": []}
    assert [r.external_id for r in gateway.created] == ["E1"]


def test_import_rejects_non_admin_and_bad_kind(client):
    _login(client, "fac-1", "faculty")
    assert client.post("/api/imports/student", data="x").status_code == 403

    _login(client, "admin-1", "admin")
    assert client.post("/api/imports/staff", data="x").status_code == 400


def test_class_management_endpoints(client, stores):
    _, classes, _, _ = stores
    _login(client, "admin-1", "admin")

    resp = client.post(
        "/api/classes",
        json={"name": "CN Lab", "code": "CNL", "subject": "CN Lab", "class_type": "lab", "batch": "K5", "faculty_id": "fac-2", "year": "TE", "semester": "1"},
    )
    assert resp.status_code == 201
    created = resp.get_json()["class"]
    assert (created["type"], created["batch"], created["faculty_name"]) == ("lab", "K5", "Prof. Iyer")
    class_id = created["class_id"]

    resp = client.post(f"/api/classes/{class_id}/auto-enroll")
    assert resp.get_json()["students"] == ["s1"]

    resp = client.post(f"/api/classes/{class_id}/students", json={"student_ids": ["s2"]})
    assert resp.get_json()["students"] == ["s1", "s2"]
    resp = client.delete(f"/api/classes/{class_id}/students", json={"student_ids": ["s1"]})
    assert resp.get_json()["students"] == ["s2"]

    resp = client.patch(f"/api/classes/{class_id}", json={"room": "Lab 3"})
    assert resp.get_json()["class"]["room"] == "Lab 3"
    assert client.patch(f"/api/classes/{class_id}", json={"faculty_id": "fac-1"}).status_code == 400

    assert client.delete(f"/api/classes/{class_id}").status_code == 200
    assert classes.get_by_id(class_id).is_active is False
    assert class_id not in [c["class_id"] for c in client.get("/api/classes").get_json()["classes"]]


def test_class_endpoints_reject_bad_input_and_non_admins(client):
    _login(client, "admin-1", "admin")
    resp = client.post("/api/classes", json={"name": "X"})
    assert resp.status_code == 400
    assert client.put("/api/classes/c1/faculty", json={"faculty_id": "fac-9"}).status_code == 404
    assert client.post("/api/classes/c1/students", json={"student_ids": []}).status_code == 400

    _login(client, "fac-1", "faculty")
    assert [c["class_id"] for c in client.get("/api/classes").get_json()["classes"]] == ["c1", "c2"]
    assert client.put("/api/classes/c1/faculty", json={"faculty_id": "fac-2"}).status_code == 403


def test_user_approval_endpoints(client, stores):
    users, _, _, _ = stores
    _login(client, "admin-1", "admin")

    body = client.get("/api/users/pending").get_json()
    assert body["users"] == [{"user_id": "s3", "name": "Chen", "role": "student", "email": None}]

    resp = client.post("/api/users/s3/approval", json={"approved": True})
    assert resp.get_json() == {"success": True, "user_id": "s3", "approved": True}
    assert users.get_student("s3").approved is True
    assert client.get("/api/users/pending").get_json()["users"] == []

    assert client.post("/api/users/s3/approval", json={"approved": "yes"}).status_code == 400
    assert client.post("/api/users/ghost/approval", json={}).status_code == 404

    _login(client, "s1", "student")
    assert client.get("/api/users/pending").status_code == 403
