"""Panel login: JWT cookie, env fallback account, panel users"""
from unittest.mock import AsyncMock

import bcrypt
import pytest
from fastapi.testclient import TestClient

import database
from admin_panel.app import app
from admin_panel.routers import auth


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(database, "get_panel_user", AsyncMock(return_value=None))
    monkeypatch.setattr(database, "update_panel_user_login", AsyncMock())
    return TestClient(app)


def test_token_round_trip():
    assert auth.verify_token(auth.create_token("jane", "superadmin")) == {"username": "jane", "role": "superadmin"}


def test_tampered_token():
    assert auth.verify_token(auth.create_token("jane") + "x") is None
    assert auth.verify_token("garbage") is None


def test_login_page(client):
    response = client.get("/login")
    assert response.status_code == 200
    assert 'name="csrf_token"' in response.text


def test_env_account_login(client):
    response = client.post("/login", data={"username": "admin", "password": "test-password"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/mailchimp"
    assert auth.verify_token(response.cookies["access_token"]) == {"username": "admin", "role": "superadmin"}


def test_panel_user_login(client):
    password_hash = bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode()
    database.get_panel_user.return_value = {"id": 7, "username": "jane", "password_hash": password_hash, "role": "admin"}

    response = client.post("/login", data={"username": "jane", "password": "s3cret"}, follow_redirects=False)

    assert response.status_code == 303
    assert auth.verify_token(response.cookies["access_token"])["username"] == "jane"
    database.update_panel_user_login.assert_awaited_once_with(7)


def test_wrong_password(client):
    response = client.post("/login", data={"username": "admin", "password": "nope"}, follow_redirects=False)
    assert response.status_code == 401
    assert "Invalid username or password" in response.text
    assert "access_token" not in response.cookies


def test_missing_fields(client):
    response = client.post("/login", data={"username": "admin"})
    assert response.status_code == 400


def test_login_without_database(monkeypatch):
    monkeypatch.setattr(database, "get_panel_user", AsyncMock(side_effect=RuntimeError("Panel database pool not initialized")))
    response = TestClient(app).post(
        "/login", data={"username": "admin", "password": "test-password"}, follow_redirects=False,
    )
    assert response.status_code == 303


def test_logout(client):
    client.cookies.set("access_token", auth.create_token("admin"))

    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert response.headers["set-cookie"].startswith("access_token=")
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_expired_session_redirects_to_login():
    client = TestClient(app)
    client.cookies.set("access_token", "not-a-jwt")
    response = client.get("/mailchimp", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
