"""
Authentication service handling signup and login.

Both operations return an Outcome: Ok on success, Err(AppError) for the
expected business failures (INVALID_ROLE, EMAIL_EXISTS, INVALID_CREDENTIALS).
"""

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core import errors
from app.core.logging import get_logger
from app.core.metrics import record_auth_event
from app.core.outcome import Err, Ok, Outcome
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User, UserRole

logger = get_logger(__name__)

SELF_ASSIGNABLE_ROLES = {UserRole.HOST, UserRole.USER}


@dataclass(frozen=True)
class IssuedToken:
    token: str
    user: User


@lru_cache()
def _dummy_hash() -> str:
    # Compared against when the email is unknown so both failure paths cost the same
    return hash_password("not-a-real-password")


async def email_registered(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == email))
    return result.scalar_one_or_none() is not None


async def signup(db: AsyncSession, email: str, password: str, role: UserRole) -> Outcome[User]:
    """
    Register a new host or user account with a bcrypt-hashed password.
    The returned User is mapped to a response without the hash.
    """
    role = UserRole(role)
    if role not in SELF_ASSIGNABLE_ROLES:
        logger.warning("signup_failed", reason="invalid_role", email=email, role=role.value)
        record_auth_event("signup", errors.INVALID_ROLE)
        return Err(errors.invalid_role())

    if await email_registered(db, email):
        logger.warning("signup_failed", reason="email_exists", email=email)
        record_auth_event("signup", errors.EMAIL_EXISTS)
        return Err(errors.email_exists())

    password_hash = await run_in_threadpool(hash_password, password)
    user = User(email=email, password_hash=password_hash, role=role.value)
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        await db.rollback()
        logger.warning("signup_failed", reason="email_exists_on_insert", email=email)
        record_auth_event("signup", errors.EMAIL_EXISTS)
        return Err(errors.email_exists())
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, role=user.role)
    record_auth_event("signup", "success")
    return Ok(user)


async def login(db: AsyncSession, email: str, password: str) -> Outcome[IssuedToken]:
    """
    Verify credentials and issue a session token embedding id and role.
    Unknown email and wrong password produce the same INVALID_CREDENTIALS error.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    stored_hash = user.password_hash if user else await run_in_threadpool(_dummy_hash)
    password_ok = await run_in_threadpool(verify_password, password, stored_hash)

    if user is None or not password_ok:
        logger.warning("login_failed", email=email)
        record_auth_event("login", errors.INVALID_CREDENTIALS)
        return Err(errors.invalid_credentials())

    token = create_access_token(user.id, user.role)
    logger.info("user_logged_in", user_id=user.id, role=user.role)
    record_auth_event("login", "success")
    return Ok(IssuedToken(token=token, user=user))
