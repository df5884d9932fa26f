"""Request guards: validate the token cookies before an endpoint runs."""

from typing import Callable

from fastapi import Depends, Request

from ..models.user import UserRole
from ..schemas.user import AuthenticatedUser
from ..services.auth import AuthService, get_auth_service
from ..services.exceptions import ForbiddenError, UnauthorizedError
from ..utils.cookies import ACCESS_TOKEN_COOKIE_NAME, REFRESH_TOKEN_COOKIE_NAME


async def require_access_token(
    request: Request, auth: AuthService = Depends(get_auth_service)
) -> AuthenticatedUser:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Access token missing")

    user = await auth.authenticate_access(token)
    request.state.user = user
    return user


async def require_refresh_token(
    request: Request, auth: AuthService = Depends(get_auth_service)
) -> AuthenticatedUser:
    token = request.cookies.get(REFRESH_TOKEN_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Refresh token missing")

    user = await auth.authenticate_refresh(token)
    request.state.user = user
    return user


def require_roles(*roles: UserRole) -> Callable:
    """Build a guard that admits only callers holding one of ``roles``."""
    allowed = frozenset(roles)

    async def verify_role(
        user: AuthenticatedUser = Depends(require_access_token),
    ) -> AuthenticatedUser:
        if user.role not in allowed:
            raise ForbiddenError("Insufficient role for this action")
        return user

    return verify_role
