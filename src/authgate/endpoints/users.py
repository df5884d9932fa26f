from fastapi import APIRouter, Depends, status

from ..config import rate_limit_dependency
from ..models.user import UserRole
from ..schemas.user import UserList
from ..services.auth import AuthService, get_auth_service
from .dependencies import require_roles

router = APIRouter()


@router.get(
    "",
    dependencies=[rate_limit_dependency, Depends(require_roles(UserRole.ADMIN))],
)
async def list_users(auth: AuthService = Depends(get_auth_service)):
    users = await auth.list_users()
    return {
        "statusCode": status.HTTP_200_OK,
        "message": "Users retrieved successfully",
        "data": UserList(users=users).model_dump(mode="json", by_alias=True),
    }
