from .auth import AuthResult, LoginRequest, RegisterRequest, TokenClaims, TokenPair
from .user import PUBLIC_USER_FIELDS, AuthenticatedUser, UserList, UserRead

__all__ = [
    "AuthResult",
    "AuthenticatedUser",
    "LoginRequest",
    "PUBLIC_USER_FIELDS",
    "RegisterRequest",
    "TokenClaims",
    "TokenPair",
    "UserList",
    "UserRead",
]
