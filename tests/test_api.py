"""HTTP-level tests for the public API."""

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from spamshield.api.deps import get_current_user
from spamshield.core.auth import create_access_token
from spamshield.persistence.models.contact import Contact
from spamshield.settings import settings
from tests.conftest import TEST_PASSWORD


async def register(client, **overrides):
    body = {"name": "Alice", "phone": "+15550000001", "password": TEST_PASSWORD}
    body.update(overrides)
    return await client.post("/register", json=body)


async def login(client, **body):
    body.setdefault("password", TEST_PASSWORD)
    response = await client.post("/login", json=body)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# Registration


@pytest.mark.asyncio
async def test_register_returns_envelope_without_secrets(test_client):
    response = await register(test_client, email="Alice@Example.com")

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["statusCode"] == 201
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]
    assert user["name"] == "alice"
    assert user["email"] == "alice@example.com"
    assert "password" not in user
    assert "hashedPassword" not in user
    assert "refreshToken" not in user
    assert {"id", "createdAt", "updatedAt"} <= set(user)


@pytest.mark.asyncio
async def test_register_duplicate_phone_is_conflict(test_client):
    await register(test_client)
    response = await register(test_client, name="Bob", email="bob@example.com")

    assert response.status_code == status.HTTP_409_CONFLICT
    body = response.json()
    assert body == {
        "statusCode": 409,
        "data": None,
        "message": "User with this phone or email already exists",
        "success": False,
        "errors": [],
    }


@pytest.mark.asyncio
async def test_register_accepts_numeric_contact_phone(test_client, db_session):
    response = await register(
        test_client,
        contacts=[{"name": "Mom", "phone": 5551111111}, {"name": "Dad", "phone": "+15552222222"}],
    )

    assert response.status_code == status.HTTP_201_CREATED
    rows = (await db_session.execute(select(Contact).order_by(Contact.id))).scalars().all()
    assert [(c.name, c.phone) for c in rows] == [("Mom", "5551111111"), ("Dad", "+15552222222")]


@pytest.mark.asyncio
async def test_register_missing_fields_is_bad_request(test_client):
    response = await test_client.post("/register", json={"name": "Alice"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Name, phone, and password are required"


@pytest.mark.asyncio
async def test_malformed_body_is_bad_request(test_client):
    response = await test_client.post("/register", json={"name": "Alice", "contacts": "not-a-list"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["errors"]


# Login, cookies and the request gate


@pytest.mark.asyncio
async def test_login_sets_http_only_secure_cookies(test_client):
    await register(test_client)
    response = await test_client.post("/login", json={"phone": "+15550000001", "password": TEST_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["phone"] == "+15550000001"
    assert data["accessToken"] and data["refreshToken"]

    cookies = response.headers.get_list("set-cookie")
    for name in ("accessToken", "refreshToken"):
        cookie = next(c for c in cookies if c.startswith(f"{name}="))
        assert "HttpOnly" in cookie
        assert "Secure" in cookie


@pytest.mark.asyncio
async def test_login_errors(test_client):
    await register(test_client)

    missing = await test_client.post("/login", json={"password": TEST_PASSWORD})
    unknown = await test_client.post("/login", json={"phone": "+19999999999", "password": TEST_PASSWORD})
    wrong = await test_client.post("/login", json={"phone": "+15550000001", "password": "nope"})

    assert missing.status_code == 400
    assert unknown.status_code == 404
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_protected_route_without_token(test_client):
    response = await test_client.get("/search", params={"query": "a"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request: No token provided"


@pytest.mark.asyncio
async def test_protected_route_with_bad_token(test_client):
    response = await test_client.get("/me", headers=bearer("garbage"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token. Authentication failed."


@pytest.mark.asyncio
async def test_protected_route_with_expired_token(test_client):
    from datetime import timedelta
    from types import SimpleNamespace

    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")
    user_id = tokens["user"]["id"]
    expired = create_access_token(
        SimpleNamespace(id=user_id, email=None, name="alice"),
        expires_delta=timedelta(seconds=-5),
    )

    response = await test_client.get("/me", headers=bearer(expired))

    assert response.status_code == 401
    assert response.json()["message"] == "Session expired. Please log in again."


@pytest.mark.asyncio
async def test_access_token_accepted_from_header_or_cookie(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    via_header = await test_client.get("/me", headers=bearer(tokens["accessToken"]))
    via_cookie = await test_client.get("/me", headers={"Cookie": f"accessToken={tokens['accessToken']}"})

    assert via_header.status_code == 200
    assert via_cookie.status_code == 200
    assert via_header.json()["data"]["phone"] == "+15550000001"


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    response = await test_client.get("/me", headers=bearer(tokens["refreshToken"]))

    assert response.status_code == 401


# Refresh and logout


@pytest.mark.asyncio
async def test_refresh_rotation_over_http(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")
    original = tokens["refreshToken"]

    first = await test_client.post("/refresh-token", json={"refreshToken": original})
    assert first.status_code == 200
    rotated = first.json()["data"]
    assert rotated["refreshToken"] != original
    assert any(c.startswith("refreshToken=") for c in first.headers.get_list("set-cookie"))

    reused = await test_client.post("/refresh-token", json={"refreshToken": original})
    assert reused.status_code == 401

    via_cookie = await test_client.post(
        "/refresh-token", headers={"Cookie": f"refreshToken={rotated['refreshToken']}"}
    )
    assert via_cookie.status_code == 200


@pytest.mark.asyncio
async def test_refresh_without_token(test_client):
    response = await test_client.post("/refresh-token")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


@pytest.mark.asyncio
async def test_logout_clears_cookies_and_blocks_refresh(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    response = await test_client.post("/logout", headers=bearer(tokens["accessToken"]))

    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"
    cleared = response.headers.get_list("set-cookie")
    assert any(c.startswith("accessToken=") for c in cleared)
    assert any(c.startswith("refreshToken=") for c in cleared)

    refresh = await test_client.post("/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert refresh.status_code == 401


# Spam, search, contact details


@pytest.mark.asyncio
async def test_mark_spam_creates_unknown_contact(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    response = await test_client.post(
        "/mark-spam", json={"phone": "+15559990000"}, headers=bearer(tokens["accessToken"])
    )

    assert response.status_code == 200
    contact = response.json()["data"]
    assert contact["name"] == "Unknown"
    assert contact["spam"] is True
    assert contact["phone"] == "+15559990000"
    assert contact["owner"] == tokens["user"]["id"]


@pytest.mark.asyncio
async def test_mark_spam_requires_phone(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    response = await test_client.post("/mark-spam", json={}, headers=bearer(tokens["accessToken"]))

    assert response.status_code == 400
    assert response.json()["message"] == "Phone number is required"


@pytest.mark.asyncio
async def test_search_projects_name_phone_spam(test_client):
    await register(test_client, name="Anna", phone="+15550000001")
    await register(test_client, name="Joanne", phone="+15550000002", email="jo@example.com")
    await register(test_client, name="Carl", phone="+15550000003")
    tokens = await login(test_client, phone="+15550000003")

    response = await test_client.get("/search", params={"query": "ann"}, headers=bearer(tokens["accessToken"]))

    assert response.status_code == 200
    results = response.json()["data"]
    assert results == [
        {"name": "anna", "phone": "+15550000001", "spam": False},
        {"name": "joanne", "phone": "+15550000002", "spam": False},
    ]


@pytest.mark.asyncio
async def test_search_without_query_is_bad_request(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    response = await test_client.get("/search", headers=bearer(tokens["accessToken"]))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_contact_details_email_visibility(test_client):
    """The owner's email shows only for viewers the owner saved."""
    await register(
        test_client,
        name="Owner",
        phone="+15550000001",
        email="owner@example.com",
        contacts=[{"name": "Friend", "phone": "+15550000002"}],
    )
    await register(test_client, name="Friend", phone="+15550000002")
    await register(test_client, name="Stranger", phone="+15550000003")
    owner_tokens = await login(test_client, phone="+15550000001")
    friend_tokens = await login(test_client, phone="+15550000002")
    stranger_tokens = await login(test_client, phone="+15550000003")

    spam = await test_client.post(
        "/mark-spam", json={"phone": "+15550000002"}, headers=bearer(owner_tokens["accessToken"])
    )
    contact_id = spam.json()["data"]["id"]

    as_friend = await test_client.get(f"/contact/{contact_id}", headers=bearer(friend_tokens["accessToken"]))
    as_stranger = await test_client.get(f"/contact/{contact_id}", headers=bearer(stranger_tokens["accessToken"]))

    assert as_friend.status_code == 200
    assert as_friend.json()["data"] == {
        "name": "Friend",
        "phone": "+15550000002",
        "spam": True,
        "email": "owner@example.com",
    }
    assert as_stranger.json()["data"]["email"] is None


@pytest.mark.asyncio
async def test_contact_details_errors(test_client):
    await register(test_client)
    tokens = await login(test_client, phone="+15550000001")

    malformed = await test_client.get("/contact/not-an-id", headers=bearer(tokens["accessToken"]))
    missing = await test_client.get("/contact/12345", headers=bearer(tokens["accessToken"]))

    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid contact ID format"
    assert missing.status_code == 404


# Ambient behaviour


@pytest.mark.asyncio
async def test_health_and_request_id(test_client):
    response = await test_client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(test_client):
    response = await test_client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_unhandled_error_is_generic_500(db_session):
    """Internal failures are reported without leaking details."""
    from spamshield.main import app
    from spamshield.persistence.database import get_db

    async def broken_user():
        raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_current_user] = broken_user
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/me")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    assert "hunter2" not in response.text


@pytest.mark.asyncio
async def test_cors_only_allows_configured_origins(test_client):
    allowed = settings.cors_allowed_origins[0]

    trusted = await test_client.get("/health", headers={"Origin": allowed})
    foreign = await test_client.get("/health", headers={"Origin": "https://evil.example"})

    assert trusted.headers["access-control-allow-origin"] == allowed
    assert trusted.headers["access-control-allow-credentials"] == "true"
    assert "access-control-allow-origin" not in foreign.headers
