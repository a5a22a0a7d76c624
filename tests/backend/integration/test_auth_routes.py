import datetime as dt
import uuid

import pytest

from devcamper.models.user import User


pytestmark = pytest.mark.asyncio


async def register_user(client, email: str, password: str, role: str = "user", name: str = "Test User"):
    return await client.post(
        "/api/v1/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )


async def login_user(client, email: str, password: str):
    return await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password},
    )


async def test_register_and_login_flow(client):
    email = f"user_{uuid.uuid4().hex[:6]}@example.com"
    password = "StrongPass!23"

    resp = await register_user(client, email, password)
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["token"]
    assert "token" in resp.cookies

    # Duplicate email should fail
    dup_resp = await register_user(client, email, password)
    dup_body = dup_resp.json()
    assert dup_resp.status_code == 400
    assert dup_body["success"] is False
    assert "email" in dup_body["error"]

    # Successful login
    login_resp = await login_user(client, email, password)
    assert login_resp.status_code == 200
    assert login_resp.json()["token"]

    # Invalid password
    bad_login = await login_user(client, email, "wrong-password")
    assert bad_login.status_code == 401
    assert bad_login.json() == {"success": False, "error": "Invalid credentials"}


async def test_register_cannot_pick_admin_role(client):
    resp = await register_user(client, "sneaky@example.com", "secret123", role="admin")
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert await User.filter(email="sneaky@example.com").count() == 0


async def test_register_validation(client):
    resp = await client.post(
        "/api/v1/auth/register",
        json={"name": "Short", "email": "not-an-email", "password": "123"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


async def test_login_requires_email_and_password(client):
    resp = await client.post("/api/v1/auth/login", json={"email": "a@b.com"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Please provide an email and password"


async def test_me_with_header_and_cookie(client):
    await register_user(client, "publisher@example.com", "secret123", role="publisher", name="Pub")
    login_resp = await login_user(client, "publisher@example.com", "secret123")
    token = login_resp.json()["token"]

    me_resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    data = me_resp.json()["data"]
    assert me_resp.status_code == 200
    assert data["email"] == "publisher@example.com"
    assert data["role"] == "publisher"
    assert "password_hash" not in data

    # The cookie set on login is accepted as well
    cookie_resp = await client.get("/api/v1/auth/me")
    assert cookie_resp.status_code == 200


async def test_me_without_token(client):
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Not authorized to access this route"}


async def test_me_with_garbage_token(client):
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_logout_clears_cookie(client):
    await register_user(client, "bye@example.com", "secret123")
    await login_user(client, "bye@example.com", "secret123")
    resp = await client.get("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {}}
    assert "token" not in client.cookies


async def test_update_details(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)

    resp = await client.put(
        "/api/v1/auth/updateDetails",
        json={"name": "Renamed", "email": "renamed@example.com"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Renamed"
    assert resp.json()["data"]["email"] == "renamed@example.com"

    missing = await client.put("/api/v1/auth/updateDetails", json={"name": "Only"}, headers=headers)
    assert missing.status_code == 400


async def test_update_password(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)

    wrong = await client.put(
        "/api/v1/auth/updatePassword",
        json={"oldPassword": "nope", "newPassword": "NewPass#456"},
        headers=headers,
    )
    assert wrong.status_code == 401

    ok = await client.put(
        "/api/v1/auth/updatePassword",
        json={"oldPassword": password, "newPassword": "NewPass#456"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert ok.json()["token"]

    # Old password should fail, new password succeeds
    assert (await login_user(client, user.email, password)).status_code == 401
    assert (await login_user(client, user.email, "NewPass#456")).status_code == 200


async def test_forgot_and_reset_password(client, create_user, mailer):
    user, password = await create_user()

    resp = await client.post("/api/v1/auth/forgotPassword", json={"email": user.email})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": "Token sent to email"}

    [message] = mailer.sent
    assert message["to"] == user.email
    reset_url = next(word for word in message["text"].split() if "/resetPassword/" in word)
    raw_token = reset_url.rsplit("/", 1)[1]

    stored = await User.get(id=user.id)
    assert stored.reset_password_token and stored.reset_password_token != raw_token
    assert stored.reset_password_expire is not None

    reset = await client.put(f"/api/v1/auth/resetPassword/{raw_token}", json={"password": "Reset#789"})
    assert reset.status_code == 200
    assert reset.json()["token"]

    stored = await User.get(id=user.id)
    assert stored.reset_password_token is None
    assert (await login_user(client, user.email, "Reset#789")).status_code == 200

    # The token is single use
    again = await client.put(f"/api/v1/auth/resetPassword/{raw_token}", json={"password": "Again#789"})
    assert again.status_code == 400


async def test_reset_password_with_expired_token(client, create_user, mailer):
    user, _ = await create_user()
    await client.post("/api/v1/auth/forgotPassword", json={"email": user.email})
    raw_token = mailer.sent[0]["text"].split("/resetPassword/", 1)[1].split()[0]

    await User.filter(id=user.id).update(
        reset_password_expire=dt.datetime.now(dt.timezone.utc) - dt.timedelta(minutes=1)
    )
    resp = await client.put(f"/api/v1/auth/resetPassword/{raw_token}", json={"password": "Reset#789"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Token is invalid or has expired"


async def test_forgot_password_unknown_email(client):
    resp = await client.post("/api/v1/auth/forgotPassword", json={"email": "ghost@example.com"})
    assert resp.status_code == 404


async def test_forgot_password_mail_failure_clears_token(client, create_user, mailer):
    user, _ = await create_user()
    mailer.fail = True

    resp = await client.post("/api/v1/auth/forgotPassword", json={"email": user.email})
    assert resp.status_code == 500
    assert resp.json()["success"] is False

    stored = await User.get(id=user.id)
    assert stored.reset_password_token is None
    assert stored.reset_password_expire is None
