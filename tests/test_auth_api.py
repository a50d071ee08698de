"""
Tests for login, logout, password reset and Metabase embedding
"""
from datetime import timedelta

from jose import jwt

from portal.core.config import settings
from portal.core.security import (
    create_password_reset_token,
    decode_password_reset_token,
    get_password_hash,
    verify_password,
)
from portal.models import ActiveSession

EMAIL = "owner@siam.example"


def test_password_hashing():
    hashed = get_password_hash("s3cret-pass")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-pass", None)
    assert not verify_password("s3cret-pass", "not-a-hash")


def test_reset_token_round_trip():
    token = create_password_reset_token(EMAIL)
    assert decode_password_reset_token(token) == EMAIL

    expired = create_password_reset_token(EMAIL, expires_delta=timedelta(minutes=-1))
    assert decode_password_reset_token(expired) is None

    foreign = jwt.encode({"sub": EMAIL, "purpose": "other"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    assert decode_password_reset_token(foreign) is None


def test_login_registers_session(client, db_session, client_user, test_password, tenant):
    response = client.post("/api/auth/login", json={"email": EMAIL, "password": test_password})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"] == {"email": EMAIL, "clientId": str(tenant.id)}
    assert client.cookies.get(settings.SESSION_COOKIE_NAME) == data["sessionId"]

    assert client.get("/api/session/status").json()["active"] is True


def test_login_rejects_bad_credentials(client, client_user, test_password):
    response = client.post("/api/auth/login", json={"email": EMAIL, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password"}

    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": test_password})
    assert response.status_code == 401


def test_logout(client, db_session, client_user, test_password):
    client.post("/api/auth/login", json={"email": EMAIL, "password": test_password})

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert db_session.query(ActiveSession).count() == 0
    assert client.get("/api/session/status").json()["active"] is False


def test_forgot_password_does_not_reveal_accounts(client, client_user):
    known = client.post("/api/auth/forgot-password", json={"email": EMAIL})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert "resetLink" not in known.json()


def test_forgot_password_link_in_debug(client, client_user, monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", True)
    response = client.post("/api/auth/forgot-password", json={"email": EMAIL})
    link = response.json()["resetLink"]
    assert link.startswith(f"{settings.PORTAL_BASE_URL}/reset-password?token=")

    token = link.split("token=", 1)[1]
    assert decode_password_reset_token(token) == EMAIL


def test_reset_password_revokes_sessions(client, db_session, client_user, test_password):
    client.post("/api/auth/login", json={"email": EMAIL, "password": test_password})
    assert db_session.query(ActiveSession).count() == 1

    token = create_password_reset_token(EMAIL)
    response = client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert response.status_code == 200
    assert db_session.query(ActiveSession).count() == 0

    response = client.post("/api/auth/login", json={"email": EMAIL, "password": test_password})
    assert response.status_code == 401
    response = client.post("/api/auth/login", json={"email": EMAIL, "password": "brand-new-pass"})
    assert response.status_code == 200


def test_reset_password_rejects_bad_input(client, client_user):
    response = client.post("/api/auth/reset-password", json={"token": "garbage", "password": "brand-new-pass"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid or expired reset token"

    token = create_password_reset_token(EMAIL)
    response = client.post("/api/auth/reset-password", json={"token": token, "password": "short"})
    assert response.status_code == 400
    assert "at least 8" in response.json()["error"]


def test_metabase_embed_url(client, monkeypatch):
    monkeypatch.setattr(settings, "METABASE_SITE_URL", "https://metabase.example.com/")
    monkeypatch.setattr(settings, "METABASE_SECRET_KEY", "metabase-secret")

    response = client.get("/api/metabase/embed-url", params={"dashboardId": 7, "params": '{"business": "abc"}'})
    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("https://metabase.example.com/embed/dashboard/")
    assert url.endswith("#bordered=true&titled=true")

    token = url.split("/embed/dashboard/", 1)[1].split("#", 1)[0]
    payload = jwt.decode(token, "metabase-secret", algorithms=["HS256"])
    assert payload["resource"] == {"dashboard": 7}
    assert payload["params"] == {"business": "abc"}


def test_metabase_errors(client, monkeypatch):
    monkeypatch.setattr(settings, "METABASE_SITE_URL", None)
    monkeypatch.setattr(settings, "METABASE_SECRET_KEY", None)

    response = client.get("/api/metabase/embed-url", params={"dashboardId": 7})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate embed URL"

    response = client.get("/api/metabase/embed-url", params={"dashboardId": 7, "params": "{not json"})
    assert response.status_code == 400

    response = client.get("/api/metabase/embed-url")
    assert response.status_code == 400
