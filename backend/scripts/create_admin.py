"""Create an admin account, or promote an existing account to admin.

Signup never grants the admin role, so operators bootstrap admins here:

    python -m scripts.create_admin ops@example.com 'a-long-password'
    python -m scripts.create_admin existing@example.com --promote
"""

import argparse
import asyncio
from typing import Optional

from sqlalchemy import select

from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.core.security import hash_password
from app.db.session import Database
from app.models.user import User, UserRole

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("email", help="Email address of the admin account")
    parser.add_argument("password", nargs="?", help="Password for a new account")
    parser.add_argument(
        "--promote",
        action="store_true",
        help="Promote an existing account instead of creating one",
    )
    return parser.parse_args()


async def create_admin(email: str, password: Optional[str], promote: bool) -> None:
    database = Database.from_settings(get_settings())
    try:
        async with database.session() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

            if promote:
                if user is None:
                    raise SystemExit(f"No user found for email {email}")
                user.role = UserRole.ADMIN.value
                logger.info("admin_promoted", user_id=user.id)
                print(f"{email} is now an admin.")
                return

            if user is not None:
                raise SystemExit(f"{email} already exists; use --promote")
            if not password or len(password) < MIN_PASSWORD_LENGTH:
                raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

            user = User(email=email, password_hash=hash_password(password), role=UserRole.ADMIN.value)
            session.add(user)
            await session.flush()
            logger.info("admin_created", user_id=user.id)
            print(f"Admin account {email} created with id {user.id}.")
    finally:
        await database.dispose()


def main() -> None:
    setup_logging()
    args = _parse_args()
    asyncio.run(create_admin(args.email, args.password, args.promote))


if __name__ == "__main__":
    main()
