"""
Pydantic schemas for experience request/response validation.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import AwareDatetime, BaseModel, Field, field_validator

from app.db.base import INTEGER_MAX
from app.models.experience import ExperienceStatus

SortOrder = Literal["asc", "desc"]


class ExperienceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0, le=INTEGER_MAX, strict=True)
    start_time: AwareDatetime

    @field_validator("start_time")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return value.astimezone(timezone.utc)


class ExperienceResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    location: str
    price: int
    start_time: datetime
    created_by: int
    status: ExperienceStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class ExperienceListResponse(BaseModel):
    experiences: list[ExperienceResponse]
    total: int
    page: int
    limit: int


@dataclass(frozen=True)
class ExperienceFilters:
    """Already-validated listing parameters."""
    location: Optional[str] = None
    start_from: Optional[datetime] = None
    start_to: Optional[datetime] = None
    page: int = 1
    limit: int = 10
    sort: SortOrder = "asc"
