"""
Create a user (e.g. the first admin) without going through /auth/register.
  python -m authgate.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m authgate.scripts.create_user admin@acme.io your-secure-password admin
"""
import argparse
import asyncio
import sys

from pydantic import ValidationError

from ..config import close_db_connection, init_db, settings
from ..models.user import UserRole
from ..schemas.auth import RegisterRequest
from ..services.exceptions import ConflictError
from ..services.users import UserStore, build_password_helper


async def create_user(email: str, password: str, role: UserRole) -> int:
    try:
        credentials = RegisterRequest(email=email, password=password)
    except ValidationError as e:
        print(f"Invalid credentials: {e}", file=sys.stderr)
        return 1

    store = UserStore(build_password_helper(settings.BCRYPT_ROUNDS))
    try:
        user = await store.create(credentials.email, credentials.password, role=role)
    except ConflictError:
        print(f"User '{credentials.email}' already exists.", file=sys.stderr)
        return 1

    print(f"Created user '{user.email}' with role '{user.role.value}'.")
    return 0


async def _run(args: argparse.Namespace) -> int:
    await init_db(generate_schemas=args.generate_schemas)
    try:
        return await create_user(args.email, args.password, UserRole(args.role))
    finally:
        await close_db_connection()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an authgate user.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "role", nargs="?", default=UserRole.USER.value, choices=[r.value for r in UserRole]
    )
    parser.add_argument(
        "--generate-schemas", action="store_true", help="Create missing tables first"
    )
    args = parser.parse_args()
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
