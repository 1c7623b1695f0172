"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from app.db.base import INTEGER_MAX
from app.models.booking import BookingStatus


class BookingCreate(BaseModel):
    seats: int = Field(..., ge=1, le=INTEGER_MAX, strict=True)


class BookingResponse(BaseModel):
    id: int
    experience_id: int
    user_id: int
    seats: int
    status: BookingStatus
    created_at: datetime

    model_config = {"from_attributes": True}
