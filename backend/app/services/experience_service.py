"""
Experience service: creation, moderation transitions and the public listing.

State machine:
    draft --publish--> published --block--> blocked

publish/block set the target status without checking the current one.
Who may call them is decided by the request interceptors, not here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors
from app.core.logging import get_logger
from app.core.metrics import record_experience_transition
from app.core.outcome import Err, Ok, Outcome
from app.db.base import INTEGER_MAX
from app.models.experience import Experience, ExperienceStatus
from app.schemas.experience import ExperienceFilters

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExperiencePage:
    experiences: list[Experience]
    total: int
    page: int
    limit: int


async def create_experience(
    db: AsyncSession,
    title: str,
    description: Optional[str],
    location: str,
    price: int,
    start_time: datetime,
    created_by: int,
) -> Outcome[Experience]:
    """Insert a draft listing. Input is trusted as already validated."""
    experience = Experience(
        title=title,
        description=description,
        location=location,
        price=price,
        start_time=start_time,
        created_by=created_by,
        status=ExperienceStatus.DRAFT.value,
    )
    db.add(experience)
    await db.flush()
    await db.refresh(experience)

    logger.info("experience_created", experience_id=experience.id, host_id=created_by)
    record_experience_transition(ExperienceStatus.DRAFT.value)
    return Ok(experience)


async def get_experience(db: AsyncSession, experience_id: int) -> Optional[Experience]:
    """Return the listing or None; absence is not an error here."""
    if not 0 < experience_id <= INTEGER_MAX:
        return None
    result = await db.execute(select(Experience).where(Experience.id == experience_id))
    return result.scalar_one_or_none()


async def get_owner_id(db: AsyncSession, experience_id: int) -> Outcome[int]:
    experience = await get_experience(db, experience_id)
    if experience is None:
        return Err(errors.not_found("Experience not found"))
    return Ok(experience.created_by)


async def _set_status(db: AsyncSession, experience_id: int, new_status: ExperienceStatus) -> Outcome[Experience]:
    experience = await get_experience(db, experience_id)
    if experience is None:
        return Err(errors.not_found("Experience not found"))

    previous = experience.status
    experience.status = new_status.value
    await db.flush()
    await db.refresh(experience)

    logger.info(
        "experience_status_changed",
        experience_id=experience.id,
        from_status=previous,
        to_status=new_status.value,
    )
    record_experience_transition(new_status.value)
    return Ok(experience)


async def publish_experience(db: AsyncSession, experience_id: int) -> Outcome[Experience]:
    return await _set_status(db, experience_id, ExperienceStatus.PUBLISHED)


async def block_experience(db: AsyncSession, experience_id: int) -> Outcome[Experience]:
    return await _set_status(db, experience_id, ExperienceStatus.BLOCKED)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _listing_conditions(filters: ExperienceFilters) -> list:
    """WHERE clause shared by the count and the page query."""
    conditions = [Experience.status == ExperienceStatus.PUBLISHED.value]
    if filters.location:
        conditions.append(
            Experience.location.ilike(f"%{_escape_like(filters.location)}%", escape="\\")
        )
    if filters.start_from is not None:
        conditions.append(Experience.start_time >= filters.start_from)
    if filters.start_to is not None:
        conditions.append(Experience.start_time <= filters.start_to)
    return conditions


async def list_published(db: AsyncSession, filters: ExperienceFilters) -> Outcome[ExperiencePage]:
    """
    Published listings narrowed by location substring (case-insensitive)
    and an inclusive start_time range, ordered by start_time.
    `total` counts every match regardless of page/limit.
    """
    conditions = _listing_conditions(filters)

    count_query = select(func.count()).select_from(Experience).where(*conditions)
    total = (await db.execute(count_query)).scalar_one()

    order = Experience.start_time.desc() if filters.sort == "desc" else Experience.start_time.asc()
    page_query = (
        select(Experience)
        .where(*conditions)
        .order_by(order, Experience.id.asc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    result = await db.execute(page_query)
    experiences = list(result.scalars().all())

    return Ok(ExperiencePage(experiences=experiences, total=total, page=filters.page, limit=filters.limit))
