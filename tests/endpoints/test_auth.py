"""Tests for the /auth endpoints."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from authgate.asgi import create_application
from authgate.config import settings
from authgate.models.user import User
from authgate.services.users import UserStore


def cookie_header(**cookies):
    return {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}


async def register(client, email="a@x.com", password="secret1"):
    response = await client.post("/auth/register", json={"email": email, "password": password})
    client.cookies.clear()
    return response


async def post_with_cookies(client, path, **cookies):
    client.cookies.clear()
    response = await client.post(path, headers=cookie_header(**cookies))
    client.cookies.clear()
    return response


async def get_with_cookies(client, path, **cookies):
    client.cookies.clear()
    response = await client.get(path, headers=cookie_header(**cookies))
    client.cookies.clear()
    return response


def set_cookies(response):
    return {c.split("=", 1)[0]: c for c in response.headers.get_list("set-cookie")}


class TestRegisterEndpoint:
    """Test cases for POST /auth/register."""

    @pytest.mark.asyncio
    async def test_register_created(self, client):
        response = await register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["statusCode"] == 201
        assert body["accessToken"]
        assert body["refreshToken"]
        user = body["data"]["user"]
        assert user["email"] == "a@x.com"
        assert user["role"] == "user"
        assert user["isActive"] is True
        assert "hashedPassword" not in user
        record = await User.get(email="a@x.com")
        assert record.hashed_password != "secret1"

    @pytest.mark.asyncio
    async def test_register_sets_cookies(self, client):
        response = await register(client)

        cookies = set_cookies(response)
        assert set(cookies) == {"access_token", "refresh_token"}
        access = cookies["access_token"].lower()
        assert "httponly" in access
        assert "samesite=strict" in access
        assert "path=/" in access
        assert f"max-age={settings.access_token_max_age}" in access
        assert "secure" not in access
        assert f"max-age={settings.refresh_token_max_age}" in cookies["refresh_token"].lower()

    @pytest.mark.asyncio
    async def test_register_duplicate_conflict(self, client):
        await register(client)

        response = await register(client)

        assert response.status_code == 409
        body = response.json()
        assert body["statusCode"] == 409
        assert body["path"] == "/auth/register"
        assert body["message"] == "User with this email already exists"
        assert body["timestamp"].endswith("Z")
        assert body["error"] == "ConflictError"

    @pytest.mark.asyncio
    async def test_register_email_is_case_insensitive(self, client):
        await register(client, email="A@X.com")

        response = await register(client, email="a@x.com")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_validation(self, client):
        response = await client.post(
            "/auth/register", json={"email": "not-an-email", "password": "123"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["statusCode"] == 400
        assert isinstance(body["message"], list)
        assert len(body["message"]) == 2

    @pytest.mark.asyncio
    async def test_register_rejects_unknown_fields(self, client):
        response = await client.post(
            "/auth/register",
            json={"email": "a@x.com", "password": "secret1", "role": "admin"},
        )

        assert response.status_code == 400
        assert await User.filter(email="a@x.com").count() == 0


class TestLoginEndpoint:
    """Test cases for POST /auth/login."""

    @pytest.mark.asyncio
    async def test_login_success(self, client):
        await register(client)

        response = await client.post(
            "/auth/login", json={"email": "a@x.com", "password": "secret1"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"]
        assert body["refreshToken"]
        assert body["data"]["user"]["email"] == "a@x.com"
        assert set(set_cookies(response)) == {"access_token", "refresh_token"}

    @pytest.mark.asyncio
    async def test_login_wrong_password_sets_no_cookies(self, client):
        await register(client)

        response = await client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client):
        response = await client.post(
            "/auth/login", json={"email": "nobody@x.com", "password": "secret1"}
        )

        assert response.status_code == 401


class TestProfileEndpoint:
    """Test cases for GET /auth/profile."""

    @pytest.mark.asyncio
    async def test_profile_with_registration_token(self, client):
        registered = (await register(client)).json()

        response = await get_with_cookies(
            client, "/auth/profile", access_token=registered["accessToken"]
        )

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["email"] == "a@x.com"
        assert user["id"] == registered["data"]["user"]["id"]

    @pytest.mark.asyncio
    async def test_profile_with_login_token(self, client):
        await register(client)
        login = await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})

        response = await get_with_cookies(
            client, "/auth/profile", access_token=login.json()["accessToken"]
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_profile_uses_cookie_jar(self, client):
        """Cookies set by login are enough to reach the profile."""
        await register(client)
        await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})

        response = await client.get("/auth/profile")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_profile_without_cookie(self, client):
        response = await client.get("/auth/profile")

        assert response.status_code == 401
        assert response.json()["message"] == "Access token missing"

    @pytest.mark.asyncio
    async def test_profile_rejects_wrong_secret(self, client):
        registered = (await register(client)).json()
        user = registered["data"]["user"]
        forged = jwt.encode(
            {
                "sub": user["id"],
                "email": user["email"],
                "role": "admin",
                "jti": uuid.uuid4().hex,
                "iat": datetime.now(timezone.utc),
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            "wrong-secret",
            algorithm="HS256",
        )

        response = await get_with_cookies(client, "/auth/profile", access_token=forged)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_profile_rejects_refresh_token(self, client):
        registered = (await register(client)).json()

        response = await get_with_cookies(
            client, "/auth/profile", access_token=registered["refreshToken"]
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_profile_rejects_expired_token(self, client):
        registered = (await register(client)).json()
        user = registered["data"]["user"]
        now = datetime.now(timezone.utc)
        expired = jwt.encode(
            {
                "sub": user["id"],
                "email": user["email"],
                "role": user["role"],
                "jti": uuid.uuid4().hex,
                "iat": now - timedelta(hours=1),
                "exp": now - timedelta(minutes=1),
            },
            settings.ACCESS_TOKEN_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        response = await get_with_cookies(client, "/auth/profile", access_token=expired)

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    @pytest.mark.asyncio
    async def test_profile_rejects_inactive_user(self, client):
        registered = (await register(client)).json()
        await User.filter(email="a@x.com").update(is_active=False)

        response = await get_with_cookies(
            client, "/auth/profile", access_token=registered["accessToken"]
        )

        assert response.status_code == 401


class TestLogoutAndRefreshEndpoints:
    """Test cases for POST /auth/logout and POST /auth/refresh."""

    @pytest.mark.asyncio
    async def test_logout_clears_cookies(self, client):
        registered = (await register(client)).json()

        response = await post_with_cookies(
            client, "/auth/logout", access_token=registered["accessToken"]
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"
        cookies = set_cookies(response)
        assert set(cookies) == {"access_token", "refresh_token"}
        assert all("max-age=0" in c.lower() for c in cookies.values())

    @pytest.mark.asyncio
    async def test_logout_requires_access_token(self, client):
        response = await client.post("/auth/logout")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_after_logout_fails(self, client):
        registered = (await register(client)).json()
        await post_with_cookies(client, "/auth/logout", access_token=registered["accessToken"])

        response = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["refreshToken"]
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_sets_new_cookies(self, client):
        registered = (await register(client)).json()

        response = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["refreshToken"]
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Tokens refreshed successfully"
        cookies = set_cookies(response)
        assert set(cookies) == {"access_token", "refresh_token"}
        assert registered["refreshToken"] not in cookies["refresh_token"]

    @pytest.mark.asyncio
    async def test_old_refresh_token_fails_after_rotation(self, client):
        registered = (await register(client)).json()
        first = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["refreshToken"]
        )
        assert first.status_code == 200

        replay = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["refreshToken"]
        )

        assert replay.status_code == 401
        assert replay.json()["message"] == "Invalid refresh token"
        assert all("max-age=0" in c.lower() for c in set_cookies(replay).values())

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, client):
        registered = (await register(client)).json()

        response = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["accessToken"]
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_without_cookie(self, client):
        response = await client.post("/auth/refresh")

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token missing"

    @pytest.mark.asyncio
    async def test_refresh_rejects_inactive_user(self, client):
        registered = (await register(client)).json()
        await User.filter(email="a@x.com").update(is_active=False)

        response = await post_with_cookies(
            client, "/auth/refresh", refresh_token=registered["refreshToken"]
        )

        assert response.status_code == 401
        assert response.json()["statusCode"] == 401


class TestUnhandledErrors:
    """Test cases for the 500 envelope."""

    @pytest.mark.asyncio
    async def test_store_failure_returns_envelope(self, db, mocker):
        mocker.patch.object(UserStore, "create", side_effect=RuntimeError("db down"))
        transport = ASGITransport(app=create_application(), raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            response = await ac.post(
                "/auth/register", json={"email": "a@x.com", "password": "secret1"}
            )

        assert response.status_code == 500
        body = response.json()
        assert body["statusCode"] == 500
        assert body["path"] == "/auth/register"
        assert body["message"] == "Internal server error"
        assert body["timestamp"].endswith("Z")
        assert "db down" not in response.text
