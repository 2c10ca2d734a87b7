import pytest

from leave_attendance.main import create_app

PASSWORD = "secret123"


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username):
    resp = client.post("/api/auth/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200
    return resp.get_json()["data"]


def test_login_required_and_bad_credentials(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.post("/api/auth/login", json={"username": "mario", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_me_after_login(client):
    _login(client, "mario")
    data = client.get("/api/auth/me").get_json()["data"]
    assert data["username"] == "mario"
    assert data["role"] == "employee"
    assert data["hire_date"] == "2020-01-01"


def test_employee_cannot_use_admin_routes(client):
    _login(client, "mario")
    assert client.get("/api/leave-requests/pending").status_code == 403
    assert client.get("/api/reports/yearly?year=2025").status_code == 403


def test_leave_request_flow(client, repos):
    _login(client, "mario")
    resp = client.post(
        "/api/leave-requests",
        json={"leave_type": "vacation", "date_from": "2025-03-03", "date_to": "2025-03-07", "note": "Holiday"},
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["request_id"]
    assert resp.get_json()["data"]["status"] == "pending"

    _login(client, "admin")
    pending = client.get("/api/leave-requests/pending").get_json()["data"]
    assert [r["request_id"] for r in pending] == [request_id]

    resp = client.post(f"/api/leave-requests/{request_id}/approve", json={"admin_note": "enjoy"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "approved"
    assert repos.balances.get(2, 2025).vacation_days_used == 5

    balances = client.get("/api/leave-balances?user_id=2&year=2025").get_json()["data"]
    assert balances[0]["vacation_days_used"] == 5


def test_invalid_input_is_a_400(client):
    _login(client, "mario")
    resp = client.post("/api/leave-requests", json={"leave_type": "vacation", "date_from": "03/03/2025"})
    assert resp.status_code == 400
    assert "YYYY-MM-DD" in resp.get_json()["message"]

    resp = client.post("/api/leave-requests", json={"leave_type": "holiday"})
    assert resp.status_code == 400


def test_conflicts_are_reported_with_details(client, container):
    _login(client, "admin")
    resp = client.post(
        "/api/business-trips",
        json={"user_id": 2, "start_date": "2025-03-04", "end_date": "2025-03-05", "destination": "Paris"},
    )
    assert resp.status_code == 201
    trip_id = resp.get_json()["data"]["trip_id"]
    assert client.post(f"/api/business-trips/{trip_id}/approve", json={}).status_code == 200

    _login(client, "mario")
    check = client.post(
        "/api/conflicts/validate", json={"purpose": "vacation", "start": "2025-03-03", "end": "2025-03-07"}
    ).get_json()["data"]
    assert check["is_valid"] is False
    assert check["conflicts"][0]["conflict_type"] == "business_trip"

    resp = client.post("/api/leave-requests", json={"leave_type": "permission", "day": "2025-03-05"})
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["conflicts"][0]["severity"] == "critical"
    assert "Paris" in body["message"]

    calendar = client.post(
        "/api/conflicts/calendar", json={"purpose": "attendance", "start": "2025-03-01", "end": "2025-03-31"}
    ).get_json()["data"]
    assert [d["date"] for d in calendar] == ["2025-03-04", "2025-03-05"]
    assert all(d["blocked"] for d in calendar)

    resp = client.post(
        "/api/conflicts/calendar",
        json={"purpose": "attendance", "start": "2025-03-01", "end": "2025-03-31", "user_ids": [3]},
    )
    assert resp.status_code == 403


def test_check_in_twice(client):
    _login(client, "mario")
    assert client.post("/api/attendance/check-in").status_code == 200
    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 400
    assert client.get("/api/attendance/today").get_json()["data"]["user_id"] == 2


def test_csv_export(client, container):
    _login(client, "admin")
    resp = client.get("/api/reports/yearly/export?year=2025&format=csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "leave_summary_2025.csv" in resp.headers["Content-Disposition"]


def test_malformed_ids_are_a_400(client):
    _login(client, "admin")
    resp = client.post("/api/leave-requests", json={"user_id": "abc", "leave_type": "permission", "day": "2025-03-04"})
    assert resp.status_code == 400
    assert "user_id" in resp.get_json()["message"]

    resp = client.post(
        "/api/business-trips",
        json={"user_id": "two", "start_date": "2025-03-04", "end_date": "2025-03-05", "destination": "Paris"},
    )
    assert resp.status_code == 400

    calendar = {"purpose": "attendance", "start": "2025-03-01", "end": "2025-03-31"}
    assert client.post("/api/conflicts/calendar", json={**calendar, "user_ids": "23"}).status_code == 400
    assert client.post("/api/conflicts/calendar", json={**calendar, "user_ids": ["2", "x"]}).status_code == 400
    assert client.post("/api/conflicts/calendar", json={**calendar, "user_id": "x"}).status_code == 400
    assert client.post("/api/conflicts/calendar", json={**calendar, "user_ids": ["2", 3]}).status_code == 200
