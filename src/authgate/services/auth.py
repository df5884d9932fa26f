import logging
import uuid
from functools import lru_cache
from typing import List

import jwt

from ..config import settings
from ..models.user import User
from ..schemas.auth import AuthResult, TokenClaims, TokenPair
from ..schemas.user import AuthenticatedUser, UserRead
from .exceptions import NotFoundError, UnauthorizedError
from .tokens import TokenIssuer
from .users import UserStore, build_password_helper, refresh_token_matches

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login, logout and refresh-token rotation."""

    def __init__(self, users: UserStore, tokens: TokenIssuer) -> None:
        self.users = users
        self.tokens = tokens

    async def register(self, email: str, password: str) -> AuthResult:
        user = await self.users.create(email=email, password=password)
        tokens = await self._issue_tokens(user.id, user.email, user.role)
        logger.info(f"User {user.id} has registered.")
        return AuthResult(user=user, tokens=tokens)

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.users.get_with_credentials_by_email(email)
        if user is None:
            verified = self.users.verify_dummy_password(password)
        else:
            verified = await self.users.verify_password(user, password)
        if not verified:
            logger.warning("Rejected login with invalid credentials")
            raise UnauthorizedError("Invalid credentials")
        if not user.is_active:
            logger.warning(f"Rejected login for inactive user {user.id}")
            raise UnauthorizedError("Invalid credentials")

        tokens = await self._issue_tokens(user.id, user.email, user.role)
        return AuthResult(user=UserRead.model_validate(user), tokens=tokens)

    async def logout(self, user_id: uuid.UUID) -> None:
        await self.users.remove_refresh_token(user_id)
        logger.info(f"User {user_id} logged out.")

    async def refresh(self, user_id: uuid.UUID, refresh_token: str) -> TokenPair:
        user = await self.users.get_with_credentials(user_id)
        if user is None or not user.is_active or not user.refresh_token_hash:
            raise UnauthorizedError("Access denied")
        if not refresh_token_matches(user.refresh_token_hash, refresh_token):
            logger.warning(f"Stale or forged refresh token presented for user {user_id}")
            raise UnauthorizedError("Invalid refresh token")

        tokens = self.tokens.issue_pair(user.id, user.email, user.role)
        rotated = await self.users.rotate_refresh_token(
            user.id, user.refresh_token_hash, tokens.refresh_token
        )
        if not rotated:
            logger.warning(f"Concurrent refresh lost the rotation race for user {user_id}")
            raise UnauthorizedError("Invalid refresh token")
        return tokens

    async def get_profile(self, user_id: uuid.UUID) -> UserRead:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> List[UserRead]:
        return await self.users.list_users()

    async def authenticate_access(self, token: str) -> AuthenticatedUser:
        claims = self._decode(self.tokens.decode_access, token)
        user = await self._load_active_user(claims)
        return AuthenticatedUser(user_id=user.id, email=claims.email, role=claims.role)

    async def authenticate_refresh(self, token: str) -> AuthenticatedUser:
        claims = self._decode(self.tokens.decode_refresh, token)
        user = await self._load_active_user(claims)
        if not user.refresh_token_hash:
            raise UnauthorizedError("Refresh token not found")
        return AuthenticatedUser(user_id=user.id, email=claims.email, role=claims.role)

    async def _issue_tokens(self, user_id: uuid.UUID, email: str, role) -> TokenPair:
        tokens = self.tokens.issue_pair(user_id, email, role)
        await self.users.update_refresh_token(user_id, tokens.refresh_token)
        return tokens

    @staticmethod
    def _decode(decoder, token: str) -> TokenClaims:
        try:
            return decoder(token)
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token expired")
        except jwt.PyJWTError:
            raise UnauthorizedError("Invalid token")

    async def _load_active_user(self, claims: TokenClaims) -> User:
        try:
            user_id = uuid.UUID(claims.sub)
        except ValueError:
            raise UnauthorizedError("Invalid token payload")
        user = await self.users.get_with_credentials(user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")
        return user


@lru_cache
def get_auth_service() -> AuthService:
    return AuthService(
        users=UserStore(build_password_helper(settings.BCRYPT_ROUNDS)),
        tokens=TokenIssuer.from_settings(settings),
    )
