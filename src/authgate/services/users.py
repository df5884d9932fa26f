import hashlib
import hmac
import logging
import uuid
from typing import List, Optional

from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from tortoise import timezone
from tortoise.exceptions import IntegrityError

from ..models.user import User, UserRole
from ..schemas.user import PUBLIC_USER_FIELDS, UserRead
from .exceptions import ConflictError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def build_password_helper(rounds: int) -> PasswordHelper:
    return PasswordHelper(PasswordHash((BcryptHasher(rounds=rounds),)))


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def refresh_token_matches(stored_hash: str, token: str) -> bool:
    return hmac.compare_digest(stored_hash, hash_refresh_token(token))


def _bcrypt_input(password: str) -> str:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


class UserStore:
    """Access to the credential store.

    Plain lookups return ``UserRead`` projections that never carry the password
    or refresh-token hashes. The ``*_with_credentials`` variants return the full
    ``User`` record and are meant for the authentication flow only.
    """

    def __init__(self, password_helper: PasswordHelper) -> None:
        self.password_helper = password_helper
        # verified against when the email is unknown, so both paths cost one bcrypt check
        self._dummy_hash = password_helper.hash(password_helper.generate())

    async def get_by_email(self, email: str) -> Optional[UserRead]:
        row = await User.filter(email=email).first().values(*PUBLIC_USER_FIELDS)
        return UserRead.model_validate(row) if row else None

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRead]:
        row = await User.filter(id=user_id).first().values(*PUBLIC_USER_FIELDS)
        return UserRead.model_validate(row) if row else None

    async def get_with_credentials_by_email(self, email: str) -> Optional[User]:
        return await User.get_or_none(email=email)

    async def get_with_credentials(self, user_id: uuid.UUID) -> Optional[User]:
        return await User.get_or_none(id=user_id)

    async def list_users(self) -> List[UserRead]:
        rows = await User.all().order_by("created_at").values(*PUBLIC_USER_FIELDS)
        return [UserRead.model_validate(row) for row in rows]

    async def create(
        self, email: str, password: str, role: UserRole = UserRole.USER
    ) -> UserRead:
        if await User.filter(email=email).exists():
            raise ConflictError("User with this email already exists")

        hashed_password = self.password_helper.hash(_bcrypt_input(password))
        try:
            user = await User.create(email=email, hashed_password=hashed_password, role=role)
        except IntegrityError as e:
            # lost a race against a concurrent registration
            raise ConflictError("User with this email already exists") from e

        logger.info(f"Created user {user.id} with role {user.role.value}")
        return UserRead.model_validate(user)

    async def verify_password(self, user: User, password: str) -> bool:
        verified, updated_hash = self.password_helper.verify_and_update(
            _bcrypt_input(password), user.hashed_password
        )
        if verified and updated_hash is not None:
            user.hashed_password = updated_hash
            await user.save(update_fields=["hashed_password", "updated_at"])
        return verified

    def verify_dummy_password(self, password: str) -> bool:
        self.password_helper.verify_and_update(_bcrypt_input(password), self._dummy_hash)
        return False

    async def update_refresh_token(self, user_id: uuid.UUID, token: str) -> None:
        await User.filter(id=user_id).update(
            refresh_token_hash=hash_refresh_token(token), updated_at=timezone.now()
        )

    async def rotate_refresh_token(
        self, user_id: uuid.UUID, previous_hash: str, token: str
    ) -> bool:
        """Replace the stored hash only if it still equals ``previous_hash``.

        Returns False when another request already rotated or cleared it.
        """
        updated = await User.filter(id=user_id, refresh_token_hash=previous_hash).update(
            refresh_token_hash=hash_refresh_token(token), updated_at=timezone.now()
        )
        return updated == 1

    async def remove_refresh_token(self, user_id: uuid.UUID) -> None:
        await User.filter(id=user_id).update(refresh_token_hash=None, updated_at=timezone.now())
