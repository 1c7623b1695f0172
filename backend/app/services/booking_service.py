"""
Booking service: seat reservations against published experiences.

Checks, in order:
  1. experience exists                         -> NOT_FOUND
  2. experience is published                   -> INVALID_STATUS
  3. caller is not the experience's host       -> FORBIDDEN
  4. caller has no confirmed booking for it    -> DUPLICATE_BOOKING

Step 4 is a read-then-insert. The partial unique index
uq_bookings_confirmed_user_experience closes the race between two
identical concurrent requests; the losing insert maps to DUPLICATE_BOOKING.
There is no seat ceiling: experiences carry no capacity.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors
from app.core.logging import get_logger
from app.core.metrics import record_booking_attempt
from app.core.outcome import Err, Ok, Outcome
from app.models.booking import Booking, BookingStatus
from app.models.experience import ExperienceStatus
from app.services.experience_service import get_experience

logger = get_logger(__name__)


def _reject(error: errors.AppError, **context) -> Err:
    logger.warning("booking_rejected", code=error.code, **context)
    record_booking_attempt(error.code)
    return Err(error)


async def has_confirmed_booking(db: AsyncSession, experience_id: int, user_id: int) -> bool:
    result = await db.execute(
        select(Booking.id).where(
            Booking.experience_id == experience_id,
            Booking.user_id == user_id,
            Booking.status == BookingStatus.CONFIRMED.value,
        )
    )
    return result.scalar_one_or_none() is not None


async def create_booking(
    db: AsyncSession,
    experience_id: int,
    user_id: int,
    seats: int,
) -> Outcome[Booking]:
    experience = await get_experience(db, experience_id)
    if experience is None:
        return _reject(errors.not_found("Experience not found"), experience_id=experience_id)

    if experience.status != ExperienceStatus.PUBLISHED.value:
        return _reject(
            errors.invalid_status(),
            experience_id=experience_id,
            status=experience.status,
        )

    if experience.created_by == user_id:
        return _reject(
            errors.forbidden("Hosts cannot book their own experiences"),
            experience_id=experience_id,
            user_id=user_id,
        )

    if await has_confirmed_booking(db, experience_id, user_id):
        return _reject(errors.duplicate_booking(), experience_id=experience_id, user_id=user_id)

    booking = Booking(
        experience_id=experience_id,
        user_id=user_id,
        seats=seats,
        status=BookingStatus.CONFIRMED.value,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        return _reject(
            errors.duplicate_booking(),
            experience_id=experience_id,
            user_id=user_id,
            detected="on_insert",
        )
    await db.refresh(booking)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        experience_id=experience_id,
        seats=seats,
    )
    record_booking_attempt("success")
    return Ok(booking)
