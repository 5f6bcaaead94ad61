from __future__ import annotations

from fastapi.testclient import TestClient

from backend.app import app
from backend.auth.config import AuthConfig
from backend.auth.users import authenticate, register_user, seed_admin

client = TestClient(app)


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_admin():
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"] == {"username": "admin", "role": "admin"}


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"username": "admin", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_login_validation_rejects_empty_password():
    resp = client.post("/auth/login", json={"username": "admin", "password": ""})
    assert resp.status_code == 422


def test_auth_me_when_logged_in():
    _login_admin(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["username"] == "admin"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_admin(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Credential store ─────────────────────────────────────────────────────


def test_registered_user_gets_user_role():
    register_user("alice", "s3cret")
    assert authenticate("alice", "s3cret") == {"username": "alice", "role": "user"}
    assert authenticate("alice", "wrong") is None


def test_seed_admin_uses_configured_credentials():
    seed_admin(AuthConfig(admin_username="curator", admin_password="pa55"))
    assert authenticate("curator", "pa55") == {"username": "curator", "role": "admin"}


# ── Public endpoints stay public ─────────────────────────────────────────


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200
