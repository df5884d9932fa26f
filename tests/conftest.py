"""Shared pytest fixtures for authgate tests."""

import os

# Keep bcrypt cheap; must be set before the settings module is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from tortoise import Tortoise  # noqa: E402

from authgate.asgi import create_application  # noqa: E402
from authgate.config.database import get_tortoise_config  # noqa: E402
from authgate.services.auth import AuthService  # noqa: E402
from authgate.services.tokens import TokenIssuer  # noqa: E402
from authgate.services.users import UserStore, build_password_helper  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite database per test."""
    await Tortoise.init(config=get_tortoise_config("sqlite://:memory:"))
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
        access_lifetime=timedelta(minutes=15),
        refresh_lifetime=timedelta(days=7),
    )


@pytest.fixture
def user_store() -> UserStore:
    return UserStore(build_password_helper(4))


@pytest.fixture
def auth_service(user_store: UserStore, token_issuer: TokenIssuer) -> AuthService:
    return AuthService(users=user_store, tokens=token_issuer)


@pytest_asyncio.fixture
async def client(db):
    app = create_application()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac
