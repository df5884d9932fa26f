"""Request and token schemas for the auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.user import UserRole
from .user import UserRead

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


class _Credentials(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(_Credentials):
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class LoginRequest(_Credentials):
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class TokenClaims(BaseModel):
    """Decoded payload shared by access and refresh tokens."""

    sub: str
    email: str
    role: UserRole
    jti: str
    iat: int
    exp: int


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class AuthResult(BaseModel):
    user: UserRead
    tokens: TokenPair
