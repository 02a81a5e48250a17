import pytest

from school_appointments.appointments.report import XLSX_MIMETYPE
from school_appointments.appointments.service import NO_RETURN_SCHEDULE
from school_appointments.core.enums import Role


def _login(client, email, password):
    resp = client.post("/", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


@pytest.fixture
def as_admin(client, admin_credentials):
    _login(client, **admin_credentials)
    return client


@pytest.fixture
def as_student(client, student):
    _login(client, "juan@school.test", "secret123")
    return client


def test_login_reports_landing_and_capabilities(client, admin_credentials):
    body = _login(client, **admin_credentials)

    assert body["landing"] == "/admin/appointment"
    assert body["capabilities"]["report"] is True
    assert client.get("/").get_json()["authenticated"] is True

    client.post("/logout")
    assert client.get("/").get_json()["authenticated"] is False


def test_bad_login_is_401(client):
    resp = client.post("/", json={"email": "nobody@school.test", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_registration(client):
    resp = client.post(
        "/registration",
        json={"email": "ana@school.test", "password": "secret123", "firstname": "Ana", "lastname": "Reyes"},
    )

    assert resp.status_code == 201
    assert resp.get_json()["user"]["role"] == "student"


def test_guards(client, student):
    assert client.get("/admin/appointment").status_code == 401

    _login(client, "juan@school.test", "secret123")
    assert client.get("/admin/appointment").status_code == 403
    assert client.get("/appointments").status_code == 200


def test_admin_cannot_reach_superadmin_screens(as_admin, container):
    container.user_service.add_user(
        email="staff@school.test", firstname="Maria", lastname="Santos", role=Role.ADMIN, password="staff123"
    )
    as_admin.post("/logout")
    _login(as_admin, "staff@school.test", "staff123")

    assert as_admin.get("/admin/appointment").status_code == 200
    assert as_admin.get("/admin/report?from=2026-10-19&to=2026-10-19").status_code == 403
    assert as_admin.get("/admin/users").status_code == 403


def test_booking_flow_ends_with_a_png(as_student, section):
    client = as_student

    assert client.post("/booking/account").status_code == 200
    assert client.post("/booking/next").get_json()["flow"]["step"] == 1

    resp = client.post("/booking/details", json={"reasons": ["Enrollment"], "section_id": section.id, "note": ""})
    assert resp.get_json()["flow"]["reasons"] == ["Enrollment"]
    assert client.post("/booking/next").get_json()["flow"]["step"] == 2

    calendar = client.get("/booking/calendar").get_json()
    assert "2026-10-25" not in calendar["selectable"]
    assert calendar["max_date"] == "2027-01-19"

    options = client.post("/booking/date", json={"date": "2026-10-21"}).get_json()["options"]
    assert options[0] == {"label": "8 AM - 10 AM (10)", "value": "8 AM - 10 AM", "remaining": 10, "disabled": False}
    client.post("/booking/time", json={"time": "8 AM - 10 AM"})
    assert client.post("/booking/next").get_json()["flow"]["step"] == 3

    resp = client.post("/booking/commit")

    assert resp.status_code == 201
    assert resp.mimetype == "image/png"
    assert resp.data.startswith(b"\x89PNG")
    code = resp.headers["X-Appointment-Code"]
    assert len(code) == 6

    history = client.get("/appointments").get_json()["appointments"]
    assert [a["qrcode"] for a in history] == [code]
    assert client.get("/booking").get_json()["flow"]["step"] == 0


def test_refused_step_reports_the_reason(as_student):
    as_student.post("/booking/account")
    as_student.post("/booking/next")

    resp = as_student.post("/booking/next")

    assert resp.status_code == 400
    assert resp.get_json()["title"] == "Incomplete"
    assert as_student.get("/booking").get_json()["flow"]["step"] == 1


def test_staff_account_cannot_book(as_admin):
    assert as_admin.post("/booking/account").status_code == 403


def test_scan_and_status_update(as_admin, student, section, book, today):
    appointment = book(student, section, day=today)

    body = as_admin.get("/admin/scan?code=qr0001").get_json()
    assert body["appointment"]["id"] == appointment.id
    assert body["appointment"]["actions"] == ["completed", "cancelled", "return"]

    resp = as_admin.post(f"/admin/appointment/{appointment.id}/status", json={"status": "return"})
    assert resp.status_code == 400
    assert resp.get_json()["title"] == NO_RETURN_SCHEDULE

    resp = as_admin.post(f"/admin/appointment/{appointment.id}/status", json={"status": "completed"})
    assert resp.get_json()["appointment"]["staff_name"] == "System Administrator"

    body = as_admin.get("/admin/scan", query_string={"code": "QR0001"}).get_json()
    assert body["appointment"]["actions"] == []


def test_scan_of_unknown_code_is_404(as_admin):
    resp = as_admin.post("/admin/scan", json={"code": "nope00"})

    assert resp.status_code == 404
    assert "NOPE00" in resp.get_json()["message"]


def test_appointment_listing_searches_and_pages(as_admin, student, section, book, today):
    book(student, section, day=today)
    book(student, section, day=today, time="1 PM - 3 PM")

    body = as_admin.get("/admin/appointment", query_string={"search": "QR0002"}).get_json()

    assert body["total"] == 1
    assert body["rows"][0]["qrcode"] == "QR0002"


def test_appointment_listing_sorts_only_by_sortable_columns(as_admin, container, student, section, book, today):
    other = container.auth_service.register(
        email="ana@school.test", password="secret123", firstname="Ana", lastname="Reyes"
    )
    book(student, section, day=today)
    book(other, section, day=today, time="1 PM - 3 PM")

    body = as_admin.get("/admin/appointment", query_string={"sort": "qrcode", "direction": "desc"}).get_json()
    assert [r["qrcode"] for r in body["rows"]] == ["QR0002", "QR0001"]

    for field in ("user", "staff_name", "nope"):
        resp = as_admin.get("/admin/appointment", query_string={"sort": field})
        assert resp.status_code == 400
        assert resp.get_json()["title"] == "Invalid Sort"


def test_queue_is_public(client, student, section, book, today):
    book(student, section, day=today)

    body = client.get("/queue").get_json()

    assert body["date"] == "2026-10-19"
    assert [len(s["appointments"]) for s in body["slots"]] == [1, 0, 0, 0]


def test_report_xlsx_download(as_admin, student, section, book, today):
    book(student, section, day=today)

    resp = as_admin.get("/admin/report.xlsx?from=2026-10-19&to=2026-10-19")

    assert resp.status_code == 200
    assert resp.mimetype == XLSX_MIMETYPE
    assert resp.data.startswith(b"PK")


def test_maintenance_routes(as_admin):
    resp = as_admin.post("/admin/maintenance/reasons", json={"reason": "good moral"})
    assert resp.status_code == 201

    body = as_admin.get("/admin/maintenance").get_json()
    assert [r["reason"] for r in body["reasons"]] == ["Good Moral"]

    resp = as_admin.post("/admin/settings/dates", json={"date": "2026-12-25", "description": "Christmas"})
    assert resp.status_code == 201
    assert as_admin.post("/admin/settings/dates", json={"date": "2026-12-25"}).status_code == 400
