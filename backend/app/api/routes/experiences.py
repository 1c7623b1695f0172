"""
Experience endpoints: create, publish, block and the public listing.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import AwareDatetime
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.interceptors import (
    RequestContext, guard, parse_body, require_auth, require_owner_or_admin, require_role,
)
from app.api.responses import error_response, error_responses, json_request_body, respond
from app.core.config import get_settings
from app.core.outcome import Err, Outcome
from app.db.session import get_db
from app.models.user import UserRole
from app.schemas.experience import (
    ExperienceCreate, ExperienceFilters, ExperienceListResponse, ExperienceResponse,
)
from app.services import experience_service

settings = get_settings()
router = APIRouter(prefix="/experiences", tags=["Experiences"])


async def experience_owner(ctx: RequestContext) -> Outcome[int]:
    return await experience_service.get_owner_id(ctx.db, ctx.path_params["experience_id"])


def _render_experience(experience) -> ExperienceResponse:
    return ExperienceResponse.model_validate(experience)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    return value.astimezone(timezone.utc) if value is not None else None


@router.post(
    "",
    response_model=ExperienceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403),
    openapi_extra=json_request_body(ExperienceCreate),
)
async def create_experience(
    guarded: Outcome[RequestContext] = Depends(
        guard(require_auth, require_role(UserRole.HOST, UserRole.ADMIN))
    ),
):
    """Create a draft listing owned by the caller. Hosts and admins only."""
    if isinstance(guarded, Err):
        return error_response(guarded.error)
    ctx = guarded.value

    parsed = await parse_body(ctx, ExperienceCreate)
    if isinstance(parsed, Err):
        return error_response(parsed.error)
    payload = parsed.value

    result = await experience_service.create_experience(
        ctx.db,
        title=payload.title,
        description=payload.description,
        location=payload.location,
        price=payload.price,
        start_time=payload.start_time,
        created_by=ctx.identity.user_id,
    )
    return respond(result, _render_experience, status.HTTP_201_CREATED)


@router.patch(
    "/{experience_id:int}/publish",
    response_model=ExperienceResponse,
    responses=error_responses(401, 403, 404),
)
async def publish_experience(
    experience_id: int,
    guarded: Outcome[RequestContext] = Depends(
        guard(require_auth, require_owner_or_admin(experience_owner))
    ),
):
    """Publish a listing. The owning host or an admin."""
    if isinstance(guarded, Err):
        return error_response(guarded.error)
    ctx = guarded.value

    result = await experience_service.publish_experience(ctx.db, experience_id)
    return respond(result, _render_experience)


@router.patch(
    "/{experience_id:int}/block",
    response_model=ExperienceResponse,
    responses=error_responses(401, 403, 404),
)
async def block_experience(
    experience_id: int,
    guarded: Outcome[RequestContext] = Depends(guard(require_auth, require_role(UserRole.ADMIN))),
):
    """Block a listing, removing it from the public listing. Admins only."""
    if isinstance(guarded, Err):
        return error_response(guarded.error)
    ctx = guarded.value

    result = await experience_service.block_experience(ctx.db, experience_id)
    return respond(result, _render_experience)


@router.get("", response_model=ExperienceListResponse, responses=error_responses(400))
async def list_experiences(
    location: Optional[str] = Query(None, max_length=255),
    start_from: Optional[AwareDatetime] = Query(None, alias="from"),
    start_to: Optional[AwareDatetime] = Query(None, alias="to"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Literal["asc", "desc"] = Query("asc"),
    db: AsyncSession = Depends(get_db),
):
    """
    Public listing of published experiences.
    `total` is the full filtered count; `experiences` holds one page.
    `limit` is capped at MAX_PAGE_SIZE (100 by default); larger values are a 400.
    """
    filters = ExperienceFilters(
        location=location,
        start_from=_as_utc(start_from),
        start_to=_as_utc(start_to),
        page=page,
        limit=limit,
        sort=sort,
    )
    result = await experience_service.list_published(db, filters)
    return respond(
        result,
        lambda listing: ExperienceListResponse(
            experiences=[_render_experience(e) for e in listing.experiences],
            total=listing.total,
            page=listing.page,
            limit=listing.limit,
        ),
    )
