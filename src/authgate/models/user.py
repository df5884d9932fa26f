"""User model definition."""

import uuid
from enum import Enum

from tortoise import fields, models


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class User(models.Model):
    """Credential record: login handle, password hash and refresh-token state."""

    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    email = fields.CharField(max_length=255, unique=True, db_index=True)
    hashed_password = fields.CharField(max_length=255)
    # sha256 hex of the last refresh token handed out; NULL once logged out
    refresh_token_hash = fields.CharField(max_length=64, null=True)
    role = fields.CharEnumField(UserRole, max_length=20, default=UserRole.USER)
    is_active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM model configuration."""

        table = "users"

    def __str__(self) -> str:
        """String representation of the user."""
        return f"<User {self.email}>"
