"""Signing and verification of access/refresh JWTs."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..config import Settings
from ..models.user import UserRole
from ..schemas.auth import TokenClaims, TokenPair


class TokenIssuer:
    """Issues token pairs; each kind has its own secret and lifetime."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_lifetime: timedelta,
        refresh_lifetime: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_lifetime = access_lifetime
        self.refresh_lifetime = refresh_lifetime
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            access_lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_lifetime=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=settings.JWT_ALGORITHM,
        )

    def issue_pair(self, user_id: uuid.UUID, email: str, role: UserRole) -> TokenPair:
        claims = {"sub": str(user_id), "email": email, "role": UserRole(role).value}
        return TokenPair(
            access_token=self._sign(claims, self.access_secret, self.access_lifetime),
            refresh_token=self._sign(claims, self.refresh_secret, self.refresh_lifetime),
        )

    def decode_access(self, token: str) -> TokenClaims:
        """Raises jwt.PyJWTError on a bad signature, expiry or malformed token."""
        return self._decode(token, self.access_secret)

    def decode_refresh(self, token: str) -> TokenClaims:
        """Raises jwt.PyJWTError on a bad signature, expiry or malformed token."""
        return self._decode(token, self.refresh_secret)

    def _sign(self, claims: Dict[str, Any], secret: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            # two tokens minted within the same second must still differ
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str) -> TokenClaims:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp", "iat", "jti"]},
        )
        try:
            return TokenClaims.model_validate(payload)
        except ValueError as e:
            raise jwt.InvalidTokenError(f"Invalid token payload: {e}") from e
