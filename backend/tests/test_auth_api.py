import inspect
import logging
import re
from datetime import timedelta

import jwt

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, auth_header, login, register
from resumevault.core.config import settings
from resumevault.core.security import create_access_token
from resumevault.services import reset_codes


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Welcome to ResumeVault API"}
    assert client.get("/health").json() == {"status": "healthy"}


# ============== Register ==============


def test_register_returns_public_view(client):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["resume_uploaded"] is False
    assert body["user"]["profile_image"] == "/images/default-avatar.png"
    assert "hashed_password" not in body["user"]
    assert "password" not in body["user"]


def test_register_missing_fields(client):
    response = client.post("/api/register", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert response.json() == {"detail": "All fields are required"}


def test_register_duplicate_email(client):
    register(client)
    response = register(client, name="Other", password="p2")

    assert response.status_code == 400
    assert response.json() == {"detail": "User already exists"}
    # The original password still works
    assert login(client).status_code == 200


# ============== Login ==============


def test_login_user(client):
    user_id = register(client).json()["user"]["id"]
    response = login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "user"
    assert body["user"]["id"] == user_id
    assert body["user"]["resume_uploaded"] is False

    payload = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == str(user_id)
    assert payload["role"] == "user"


def test_login_admin(client):
    response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "admin"
    assert body["user"] is None

    payload = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert "sub" not in payload
    assert payload["exp"] - payload["iat"] == 7200


def test_login_unknown_user(client):
    response = login(client, "ghost@x.com", "p1")
    assert response.status_code == 400
    assert response.json() == {"detail": "User does not exist"}


def test_login_wrong_password(client):
    register(client)
    response = login(client, password="wrong")
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid credentials"}


# ============== Access Control Gate ==============


def test_missing_token_is_unauthorized(client):
    response = client.get("/api/profile")
    assert response.status_code == 401


def test_invalid_token_is_unauthorized(client):
    response = client.get("/api/profile", headers=auth_header("garbage"))
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_expired_token_is_unauthorized(client):
    user_id = register(client).json()["user"]["id"]
    token = create_access_token({"sub": str(user_id), "role": "user"}, timedelta(seconds=-1))

    response = client.get("/api/profile", headers=auth_header(token))
    assert response.status_code == 401


def test_admin_routes_reject_user_token(client, user_token):
    response = client.get("/api/admin/dashboard", headers=auth_header(user_token))
    assert response.status_code == 403
    assert response.json() == {"detail": "Access denied: Admins only"}


def test_admin_routes_require_authentication_first(client):
    response = client.delete("/api/admin/user/1")
    assert response.status_code == 401


def test_user_routes_reject_admin_token(client, admin_token):
    response = client.get("/api/profile", headers=auth_header(admin_token))
    assert response.status_code == 403


# ============== Password Reset ==============


def _issued_code(caplog) -> str:
    match = re.search(r"Send OTP (\d{6}) to", caplog.text)
    assert match, caplog.text
    return match.group(1)


def test_forgot_password_unknown_email(client):
    response = client.post("/api/forgot-password", json={"email": "ghost@x.com"})
    assert response.status_code == 404


def test_full_reset_flow(client, caplog):
    caplog.set_level(logging.INFO, logger="reset_codes")
    register(client)

    response = client.post("/api/forgot-password", json={"email": "a@x.com"})
    assert response.status_code == 200
    assert response.json() == {"message": "Reset code sent to email", "expires_in": 30}
    code = _issued_code(caplog)

    response = client.post("/api/verify-code", json={"email": "a@x.com", "code": code})
    assert response.status_code == 200
    assert response.json() == {"message": "Code verified"}

    # Numeric JSON codes are accepted too
    response = client.post("/api/verify-code", json={"email": "a@x.com", "code": int(code)})
    assert response.status_code == 200

    response = client.post(
        "/api/reset-password",
        json={"email": "a@x.com", "password": "p2", "code": code},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password updated successfully"}

    assert login(client, password="p1").status_code == 400
    assert login(client, password="p2").status_code == 200

    # The code was consumed
    response = client.post("/api/verify-code", json={"email": "a@x.com", "code": code})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid code"}


def test_verify_code_rejects_wrong_code(client, caplog):
    caplog.set_level(logging.INFO, logger="reset_codes")
    register(client)
    client.post("/api/forgot-password", json={"email": "a@x.com"})
    code = _issued_code(caplog)
    wrong = "100000" if code != "100000" else "100001"

    response = client.post("/api/verify-code", json={"email": "a@x.com", "code": wrong})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid code"}


def test_verify_code_after_expiry(client, caplog, monkeypatch):
    caplog.set_level(logging.INFO, logger="reset_codes")
    register(client)
    client.post("/api/forgot-password", json={"email": "a@x.com"})
    code = _issued_code(caplog)

    issued = reset_codes._utcnow()
    monkeypatch.setattr(reset_codes, "_utcnow", lambda: issued + timedelta(seconds=45))

    response = client.post("/api/verify-code", json={"email": "a@x.com", "code": code})
    assert response.status_code == 400
    assert response.json() == {"detail": "Code expired"}


def test_reset_without_code_is_allowed_by_default(client):
    register(client)
    response = client.post("/api/reset-password", json={"email": "a@x.com", "password": "p2"})

    assert response.status_code == 200
    assert login(client, password="p2").status_code == 200


def test_reset_without_code_rejected_when_required(client, monkeypatch):
    monkeypatch.setattr(settings, "RESET_REQUIRES_CODE", True)
    register(client)

    response = client.post("/api/reset-password", json={"email": "a@x.com", "password": "p2"})
    assert response.status_code == 400
    assert login(client, password="p1").status_code == 200


def test_reset_password_unknown_email(client):
    response = client.post("/api/reset-password", json={"email": "ghost@x.com", "password": "p2"})
    assert response.status_code == 404
    assert response.json() == {"detail": "User not found"}


def test_blocking_routes_run_in_threadpool():
    from fastapi.routing import APIRoute

    from resumevault.main import app

    paths = {
        "/api/register",
        "/api/login",
        "/api/forgot-password",
        "/api/verify-code",
        "/api/reset-password",
        "/api/upload",
        "/api/profile",
        "/api/users/{user_id}",
    }
    endpoints = {
        route.path: route.endpoint
        for route in app.routes
        if isinstance(route, APIRoute) and route.path in paths
    }

    assert set(endpoints) == paths
    for path, endpoint in endpoints.items():
        assert not inspect.iscoroutinefunction(endpoint), path


def test_blank_registration_fields_rejected(client):
    response = client.post(
        "/api/register",
        json={"name": "   ", "email": "a@x.com", "password": "   "},
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "All fields are required"}
