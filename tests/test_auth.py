from datetime import timedelta

from conftest import LEAD_EMAIL, LEAD_PASSWORD, login, seed_record
from placement_admin.core.auth import create_access_token


def test_login_returns_admin_details(client, lead_admin) -> None:
    response = client.post("/api/auth/login", json={"email": LEAD_EMAIL, "password": LEAD_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == lead_admin
    assert body["admin_type"] == "A1"
    assert body["department_code"] == "CS"
    assert body["token_type"] == "bearer"


def test_login_is_case_insensitive_on_email(client, lead_admin) -> None:
    response = client.post("/api/auth/login", json={"email": "Lead@Example.com", "password": LEAD_PASSWORD})
    assert response.status_code == 200


def test_wrong_password(client, lead_admin) -> None:
    response = client.post("/api/auth/login", json={"email": LEAD_EMAIL, "password": "nope-nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"
    assert response.headers["www-authenticate"] == "Bearer"


def test_me(client, lead_headers) -> None:
    response = client.get("/api/auth/me", headers=lead_headers)
    assert response.status_code == 200
    assert response.json()["email"] == LEAD_EMAIL


def test_logout_revokes_token(client, lead_headers) -> None:
    assert client.post("/api/auth/logout", headers=lead_headers).status_code == 200
    response = client.get("/api/auth/me", headers=lead_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Session has been logged out"

    # a fresh login still works
    assert client.get("/api/auth/me", headers=login(client, LEAD_EMAIL, LEAD_PASSWORD)).status_code == 200


def test_non_admin_identity_cannot_sign_in(client, identity) -> None:
    identity.issue_credential("student@example.com", "15102002", "student")
    response = client.post("/api/auth/login", json={"email": "student@example.com", "password": "15102002"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Only admins can sign in to the console"


def test_blocked_admin_is_refused(client, identity, store) -> None:
    admin_id = identity.issue_credential("blocked@example.com", "secret1", "admin")
    seed_record(store, "admins", admin_id, email="blocked@example.com", type="A2", deptCode="IT",
                status="blocked")
    response = client.post("/api/auth/login", json={"email": "blocked@example.com", "password": "secret1"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Account blocked"


def test_blocking_takes_effect_on_existing_session(client, lead_headers, assistant_headers, assistant_admin) -> None:
    assert client.get("/api/auth/me", headers=assistant_headers).status_code == 200
    client.patch(f"/api/admins/{assistant_admin}/status", headers=lead_headers)
    assert client.get("/api/auth/me", headers=assistant_headers).status_code == 403


def test_missing_and_bad_tokens(client, lead_admin) -> None:
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401

    expired = create_access_token({"sub": lead_admin}, expires_delta=timedelta(minutes=-1))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_health_reports_connectivity(client, monkeypatch) -> None:
    monkeypatch.setattr("placement_admin.main.test_postgres_connection", lambda: True)
    monkeypatch.setattr("placement_admin.main.test_mongo_connection", lambda: False)
    body = client.get("/health").json()
    assert body == {"status": "degraded", "postgres": "connected", "mongodb": "disconnected"}
