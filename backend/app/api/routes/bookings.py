"""
Booking endpoints.
"""

from fastapi import APIRouter, Depends, status

from app.api.interceptors import RequestContext, guard, parse_body, require_auth, require_role
from app.api.responses import error_response, error_responses, json_request_body, respond
from app.core.outcome import Err, Outcome
from app.models.user import UserRole
from app.schemas.booking import BookingCreate, BookingResponse
from app.services import booking_service

router = APIRouter(prefix="/experiences", tags=["Bookings"])


@router.post(
    "/{experience_id:int}/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404),
    openapi_extra=json_request_body(BookingCreate),
)
async def book_experience(
    experience_id: int,
    guarded: Outcome[RequestContext] = Depends(
        guard(require_auth, require_role(UserRole.USER, UserRole.ADMIN))
    ),
):
    """
    Reserve seats on a published experience.
    One confirmed booking per user per experience; hosts cannot book their own.
    """
    if isinstance(guarded, Err):
        return error_response(guarded.error)
    ctx = guarded.value

    parsed = await parse_body(ctx, BookingCreate)
    if isinstance(parsed, Err):
        return error_response(parsed.error)

    result = await booking_service.create_booking(
        ctx.db, experience_id, ctx.identity.user_id, parsed.value.seats
    )
    return respond(result, BookingResponse.model_validate, status.HTTP_201_CREATED)
