import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..config import credential_rate_limit_dependency, rate_limit_dependency
from ..middleware.error_handlers import error_response
from ..schemas.auth import AuthResult, LoginRequest, RegisterRequest
from ..schemas.user import AuthenticatedUser
from ..services.auth import AuthService, get_auth_service
from ..services.exceptions import UnauthorizedError
from ..utils.cookies import REFRESH_TOKEN_COOKIE_NAME, apply_auth_cookies, clear_auth_cookies
from .dependencies import require_access_token, require_refresh_token

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_payload(status_code: int, message: str, result: AuthResult) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "message": message,
        "accessToken": result.tokens.access_token,
        "refreshToken": result.tokens.refresh_token,
        "data": {"user": result.user.model_dump(mode="json", by_alias=True)},
    }


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[credential_rate_limit_dependency],
)
async def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    result = await auth.register(body.email, body.password)

    response = JSONResponse(
        _auth_payload(status.HTTP_201_CREATED, "User registered successfully", result),
        status_code=status.HTTP_201_CREATED,
    )
    apply_auth_cookies(response, result.tokens)
    return response


@router.post("/login", dependencies=[credential_rate_limit_dependency])
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = await auth.login(body.email, body.password)

    response = JSONResponse(_auth_payload(status.HTTP_200_OK, "Login successful", result))
    apply_auth_cookies(response, result.tokens)
    return response


@router.post("/logout", dependencies=[rate_limit_dependency])
async def logout(
    user: AuthenticatedUser = Depends(require_access_token),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(user.user_id)

    response = JSONResponse({"statusCode": status.HTTP_200_OK, "message": "Logout successful"})
    clear_auth_cookies(response)
    return response


@router.post("/refresh", dependencies=[credential_rate_limit_dependency])
async def refresh(
    request: Request,
    user: AuthenticatedUser = Depends(require_refresh_token),
    auth: AuthService = Depends(get_auth_service),
):
    refresh_token = request.cookies[REFRESH_TOKEN_COOKIE_NAME]
    try:
        tokens = await auth.refresh(user.user_id, refresh_token)
    except UnauthorizedError as e:
        response = error_response(request, e.status_code, e.detail, e)
        clear_auth_cookies(response)
        return response

    response = JSONResponse(
        {"statusCode": status.HTTP_200_OK, "message": "Tokens refreshed successfully"}
    )
    apply_auth_cookies(response, tokens)
    return response


@router.get("/profile", dependencies=[rate_limit_dependency])
async def profile(
    user: AuthenticatedUser = Depends(require_access_token),
    auth: AuthService = Depends(get_auth_service),
):
    user_view = await auth.get_profile(user.user_id)
    return {
        "statusCode": status.HTTP_200_OK,
        "message": "Profile retrieved successfully",
        "data": {"user": user_view.model_dump(mode="json", by_alias=True)},
    }
