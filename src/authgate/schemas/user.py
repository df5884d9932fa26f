import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.user import UserRole

# Columns a caller outside the credential store is allowed to see.
PUBLIC_USER_FIELDS = ("id", "email", "role", "is_active", "created_at")


class UserRead(BaseModel):
    """Password-stripped view of a user."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime


class UserList(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    users: List[UserRead]


class AuthenticatedUser(BaseModel):
    """Identity attached to a request once a token guard has passed."""

    user_id: uuid.UUID
    email: str
    role: UserRole
