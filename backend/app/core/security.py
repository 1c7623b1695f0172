"""
Password hashing and session tokens.

Passwords are hashed with bcrypt (random salt per hash, cost factor from
BCRYPT_ROUNDS). Session tokens are HS256 JWTs carrying the user's id and
role, valid for JWT_EXPIRE_DAYS.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from app.core.config import get_settings
from app.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """Decoded session token: who is calling and with which role."""
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(user_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    payload = {
        "userId": user_id,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Identity]:
    """
    Verify signature and expiry and return the embedded identity.
    Returns None for any invalid, expired or malformed token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "userId", "role"]},
        )
    except jwt.InvalidTokenError:
        return None

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if role not in {r.value for r in UserRole}:
        return None
    return Identity(user_id=user_id, role=role)
