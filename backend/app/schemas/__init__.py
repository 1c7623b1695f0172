from app.schemas.user import SignupRequest, SignupResponse, LoginRequest, LoginResponse, UserResponse
from app.schemas.experience import (
    ExperienceCreate, ExperienceResponse, ExperienceListResponse, ExperienceFilters,
)
from app.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "SignupRequest", "SignupResponse", "LoginRequest", "LoginResponse", "UserResponse",
    "ExperienceCreate", "ExperienceResponse", "ExperienceListResponse", "ExperienceFilters",
    "BookingCreate", "BookingResponse",
]
