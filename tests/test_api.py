import pytest
from datetime import datetime
from sqlalchemy.exc import OperationalError

from jaggle_grids.models.spreadsheet import Spreadsheet
from jaggle_grids.repositories.session_repository import SessionRepository


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "Jaggle Grids", "version": "dev"}
    assert "X-Process-Time" in resp.headers


def test_login__returns_token_and_user(client):
    resp = client.post("/api/auth/login", json={"email": "a@x.com", "name": "A"})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["token"]) == 64
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["name"] == "A"
    assert body["user"]["avatar_url"] == ""
    assert set(body["user"]) == {"id", "email", "name", "avatar_url", "created_at", "updated_at"}


def test_login__same_email_same_user_new_token(login):
    _, first = login("a@x.com", "A")
    _, second = login("a@x.com", "A")

    assert first["user"]["id"] == second["user"]["id"]
    assert first["token"] != second["token"]


@pytest.mark.parametrize("payload", [
    {},
    {"email": "a@x.com"},
    {"name": "A"},
    {"email": "not-an-email", "name": "A"},
    {"email": "a@x.com", "name": ""},
])
def test_login__invalid_body(client, payload):
    resp = client.post("/api/auth/login", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid request: email and name are required"}


def test_me__returns_current_user(client, login):
    headers, body = login("a@x.com", "A")

    resp = client.get("/api/auth/me", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["id"] == body["user"]["id"]
    assert resp.json()["email"] == "a@x.com"


@pytest.mark.parametrize("headers, message", [
    ({}, "Authorization header required"),
    ({"Authorization": ""}, "Authorization header required"),
    ({"Authorization": "Token abc"}, "Bearer token required"),
    ({"Authorization": "Bearer nope"}, "Invalid or expired session"),
])
def test_protected_routes__reject_bad_credentials(client, headers, message):
    for method, path in [
        ("GET", "/api/auth/me"),
        ("POST", "/api/auth/logout"),
        ("GET", "/api/spreadsheets"),
        ("POST", "/api/spreadsheets"),
        ("GET", "/api/spreadsheets/1"),
        ("PATCH", "/api/spreadsheets/1"),
        ("DELETE", "/api/spreadsheets/1"),
    ]:
        resp = client.request(method, path, headers=headers)
        assert resp.status_code == 401, (method, path)
        assert resp.json() == {"detail": message}
        assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_logout__revokes_token(client, login):
    headers, _ = login()

    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully"}

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_logout__leaves_other_sessions(client, login):
    headers1, _ = login()
    headers2, _ = login()

    client.post("/api/auth/logout", headers=headers1)

    assert client.get("/api/auth/me", headers=headers2).status_code == 200


def test_create_spreadsheet(client, login):
    headers, body = login()

    resp = client.post("/api/spreadsheets", json={"title": "Sheet1"}, headers=headers)

    assert resp.status_code == 201
    sheet = resp.json()
    assert sheet["id"] == 1
    assert sheet["title"] == "Sheet1"
    assert sheet["data"] == ""
    assert sheet["owner_id"] == body["user"]["id"]


@pytest.mark.parametrize("payload", [{}, {"title": ""}, {"name": "Sheet1"}])
def test_create_spreadsheet__title_required(client, login, payload):
    headers, _ = login()

    resp = client.post("/api/spreadsheets", json=payload, headers=headers)

    assert resp.status_code == 400
    assert resp.json() == {"detail": "Title is required"}


@pytest.mark.parametrize("bad_id", ["abc", "0", "-1", "1.5", "4294967296"])
def test_spreadsheet_routes__bad_id(client, login, bad_id):
    headers, _ = login()

    for method, kwargs in [("GET", {}), ("PATCH", {"json": {"title": "x"}}), ("DELETE", {})]:
        resp = client.request(method, f"/api/spreadsheets/{bad_id}", headers=headers, **kwargs)
        assert resp.status_code == 400, method
        assert resp.json() == {"detail": "Invalid spreadsheet ID"}


def test_get_spreadsheet__not_found(client, login):
    headers, _ = login()

    resp = client.get("/api/spreadsheets/7", headers=headers)

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Spreadsheet not found"}


def test_other_owner_sees_not_found(client, login):
    headers_a, _ = login("a@x.com", "A")
    headers_b, _ = login("b@y.org", "B")
    sheet_id = client.post("/api/spreadsheets", json={"title": "B's"}, headers=headers_b).json()["id"]

    assert client.get(f"/api/spreadsheets/{sheet_id}", headers=headers_a).status_code == 404
    assert client.patch(
        f"/api/spreadsheets/{sheet_id}", json={"title": "mine now"}, headers=headers_a
    ).status_code == 404
    assert client.delete(f"/api/spreadsheets/{sheet_id}", headers=headers_a).status_code == 404
    assert client.get("/api/spreadsheets", headers=headers_a).json() == []

    still_there = client.get(f"/api/spreadsheets/{sheet_id}", headers=headers_b).json()
    assert still_there["title"] == "B's"


def test_update_spreadsheet__invalid_body(client, login):
    headers, _ = login()
    sheet_id = client.post("/api/spreadsheets", json={"title": "Sheet1"}, headers=headers).json()["id"]

    resp = client.patch(f"/api/spreadsheets/{sheet_id}", json={"title": 123}, headers=headers)

    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid request body"}


def test_update_spreadsheet__empty_body_changes_nothing(client, login):
    headers, _ = login()
    created = client.post("/api/spreadsheets", json={"title": "Sheet1"}, headers=headers).json()

    resp = client.patch(f"/api/spreadsheets/{created['id']}", json={}, headers=headers)

    assert resp.status_code == 200
    assert resp.json() == created


def test_delete_spreadsheet(client, login):
    headers, _ = login()
    sheet_id = client.post("/api/spreadsheets", json={"title": "Sheet1"}, headers=headers).json()["id"]

    resp = client.delete(f"/api/spreadsheets/{sheet_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Spreadsheet deleted"}

    again = client.delete(f"/api/spreadsheets/{sheet_id}", headers=headers)
    assert again.status_code == 404


def test_full_session_scenario(client, login, app):
    headers, body = login("a@x.com", "A")
    owner_id = body["user"]["id"]

    created = client.post("/api/spreadsheets", json={"title": "Sheet1"}, headers=headers).json()
    assert created["id"] == 1
    assert created["data"] == ""

    # push updated_at into the past so the update is observable
    db = app.state.session_factory()
    try:
        db.query(Spreadsheet).filter(Spreadsheet.id == 1).update(
            {"updated_at": datetime(2020, 1, 1)}, synchronize_session=False
        )
        db.commit()
    finally:
        db.close()
    before = client.get("/api/spreadsheets/1", headers=headers).json()

    updated = client.patch("/api/spreadsheets/1", json={"data": '{"A1": 5}'}, headers=headers).json()
    assert updated["title"] == "Sheet1"
    assert updated["data"] == '{"A1": 5}'
    assert updated["updated_at"] > before["updated_at"]

    listing = client.get("/api/spreadsheets", headers=headers).json()
    assert len(listing) == 1
    assert listing[0]["title"] == "Sheet1"
    assert listing[0]["owner_name"] == "A"
    assert listing[0]["owner_id"] == owner_id
    assert "data" not in listing[0]

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/spreadsheets", headers=headers).status_code == 401


def test_cors_preflight(client):
    resp = client.options(
        "/api/spreadsheets",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "PATCH",
            "Access-Control-Request-Headers": "Authorization",
        },
    )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"


def _backdate(app, sheet_id, when):
    db = app.state.session_factory()
    try:
        db.query(Spreadsheet).filter(Spreadsheet.id == sheet_id).update(
            {"updated_at": when}, synchronize_session=False
        )
        db.commit()
    finally:
        db.close()


def test_update_spreadsheet__resaving_same_data_moves_it_to_top(client, login, app):
    headers, _ = login()
    first = client.post("/api/spreadsheets", json={"title": "First"}, headers=headers).json()
    second = client.post("/api/spreadsheets", json={"title": "Second"}, headers=headers).json()
    client.patch(f"/api/spreadsheets/{first['id']}", json={"data": "X"}, headers=headers)
    _backdate(app, first["id"], datetime(2020, 1, 1))
    _backdate(app, second["id"], datetime(2021, 1, 1))

    resp = client.patch(f"/api/spreadsheets/{first['id']}", json={"data": "X"}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["updated_at"] > "2021-01-01T00:00:00"
    listing = client.get("/api/spreadsheets", headers=headers).json()
    assert [item["title"] for item in listing] == ["First", "Second"]


def test_logout__storage_failure_still_succeeds(client, login, monkeypatch):
    headers, _ = login()

    def fail_delete(self, token, user_id):
        raise OperationalError("DELETE", {}, Exception("database is locked"))

    monkeypatch.setattr(SessionRepository, "delete_by_token_and_user", fail_delete)
    resp = client.post("/api/auth/logout", headers=headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully"}


@pytest.mark.parametrize("email", ["dev@corp.local", "qa@build.test", "me@box.localhost"])
def test_login__private_network_addresses_accepted(client, email):
    resp = client.post("/api/auth/login", json={"email": email, "name": "Dev"})

    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == email


def test_login__email_stored_as_sent(client, login):
    _, body = login("Bob@X.COM", "Bob")

    assert body["user"]["email"] == "Bob@X.COM"

    _, again = login("Bob@X.COM", "Bob")
    assert again["user"]["id"] == body["user"]["id"]
