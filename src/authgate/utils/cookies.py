"""Auth cookie read/write helpers."""

from fastapi import Response

from ..config import settings
from ..schemas.auth import TokenPair

ACCESS_TOKEN_COOKIE_NAME = "access_token"
REFRESH_TOKEN_COOKIE_NAME = "refresh_token"


def apply_auth_cookies(response: Response, tokens: TokenPair) -> None:
    secure_cookie = settings.is_production
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE_NAME,
        value=tokens.access_token,
        httponly=True,
        secure=secure_cookie,
        max_age=settings.access_token_max_age,
        samesite="strict",
        path="/",
    )
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE_NAME,
        value=tokens.refresh_token,
        httponly=True,
        secure=secure_cookie,
        max_age=settings.refresh_token_max_age,
        samesite="strict",
        path="/",
    )


def clear_auth_cookies(response: Response) -> None:
    secure_cookie = settings.is_production
    for key in (ACCESS_TOKEN_COOKIE_NAME, REFRESH_TOKEN_COOKIE_NAME):
        response.delete_cookie(
            key,
            path="/",
            secure=secure_cookie,
            httponly=True,
            samesite="strict",
        )
