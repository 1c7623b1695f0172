"""
Tests for authentication endpoints: signup and login.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.core.outcome import Err
from app.core.security import decode_access_token
from app.models.user import User, UserRole
from app.services import auth_service
from tests.conftest import TEST_PASSWORD, create_user


@pytest.mark.asyncio
async def test_signup_user(client: AsyncClient):
    """Successful signup returns the public user fields only."""
    response = await client.post("/auth/signup", json={
        "email": "new@example.com",
        "password": "securepassword",
        "role": "user",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User created successfully"
    user = data["user"]
    assert user["email"] == "new@example.com"
    assert user["role"] == "user"
    assert "id" in user and "created_at" in user
    assert "password_hash" not in user  # Never expose password hash
    assert "password" not in user


@pytest.mark.asyncio
async def test_signup_host(client: AsyncClient):
    response = await client.post("/auth/signup", json={
        "email": "newhost@example.com",
        "password": "securepassword",
        "role": "host",
    })
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "host"


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient):
    """Second signup with the same email fails with EMAIL_EXISTS."""
    body = {"email": "twice@example.com", "password": "securepassword", "role": "user"}
    first = await client.post("/auth/signup", json=body)
    assert first.status_code == 201

    second = await client.post("/auth/signup", json={**body, "role": "host"})
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_signup_admin_role_rejected(client: AsyncClient):
    """Admin cannot be self-assigned."""
    response = await client.post("/auth/signup", json={
        "email": "wannabe@example.com",
        "password": "securepassword",
        "role": "admin",
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_ROLE"
    assert error["details"] == []


@pytest.mark.asyncio
async def test_signup_admin_role_rejected_even_if_email_taken(client: AsyncClient, guest_user):
    response = await client.post("/auth/signup", json={
        "email": guest_user.email,
        "password": "securepassword",
        "role": "admin",
    })
    assert response.json()["error"]["code"] == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_signup_unknown_role(client: AsyncClient):
    response = await client.post("/auth/signup", json={
        "email": "odd@example.com",
        "password": "securepassword",
        "role": "superuser",
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"] == "role" for d in error["details"])


@pytest.mark.asyncio
async def test_signup_short_password(client: AsyncClient):
    """Password under 6 chars is a validation error."""
    response = await client.post("/auth/signup", json={
        "email": "weak@example.com",
        "password": "short",
        "role": "user",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_signup_invalid_email(client: AsyncClient):
    response = await client.post("/auth/signup", json={
        "email": "not-an-email",
        "password": "securepassword",
        "role": "user",
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "email"
    assert error["details"][0]["location"] == "body"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, host_user):
    """Valid credentials return a token carrying the user's id and role."""
    response = await client.post("/auth/login", json={
        "email": host_user.email,
        "password": TEST_PASSWORD,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["user"] == {"id": host_user.id, "role": "host"}

    identity = decode_access_token(data["token"])
    assert identity is not None
    assert identity.user_id == host_user.id
    assert identity.role == "host"


@pytest.mark.asyncio
async def test_login_after_signup(client: AsyncClient):
    await client.post("/auth/signup", json={
        "email": "fresh@example.com",
        "password": "securepassword",
        "role": "user",
    })
    response = await client.post("/auth/login", json={
        "email": "fresh@example.com",
        "password": "securepassword",
    })
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client: AsyncClient, guest_user):
    """Wrong password and unknown email produce the same 401 body."""
    wrong_password = await client.post("/auth/login", json={
        "email": guest_user.email,
        "password": "wrongpassword",
    })
    unknown_email = await client.post("/auth/login", json={
        "email": "nobody@example.com",
        "password": "wrongpassword",
    })
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_missing_password(client: AsyncClient):
    response = await client.post("/auth/login", json={"email": "someone@example.com"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_signup_email_conflict_on_insert(db_session, monkeypatch):
    """A signup that slips past the read check still hits the unique email constraint."""
    await create_user(db_session, "racer@example.com", UserRole.USER)

    async def not_registered(db, email):
        return False

    monkeypatch.setattr(auth_service, "email_registered", not_registered)

    result = await auth_service.signup(db_session, "racer@example.com", TEST_PASSWORD, UserRole.HOST)
    assert isinstance(result, Err)
    assert result.error.code == "EMAIL_EXISTS"

    count = await db_session.execute(
        select(func.count(User.id)).where(User.email == "racer@example.com")
    )
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_unknown_email_hashing_runs_in_threadpool(db_session, monkeypatch):
    offloaded = []
    real_run_in_threadpool = auth_service.run_in_threadpool

    async def recording(fn, *args):
        offloaded.append(fn)
        return await real_run_in_threadpool(fn, *args)

    monkeypatch.setattr(auth_service, "run_in_threadpool", recording)

    result = await auth_service.login(db_session, "nobody@example.com", TEST_PASSWORD)
    assert isinstance(result, Err)
    assert result.error.code == "INVALID_CREDENTIALS"
    assert auth_service._dummy_hash in offloaded
