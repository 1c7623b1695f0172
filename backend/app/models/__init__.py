from app.models.user import User, UserRole
from app.models.experience import Experience, ExperienceStatus
from app.models.booking import Booking, BookingStatus

__all__ = [
    "User", "UserRole",
    "Experience", "ExperienceStatus",
    "Booking", "BookingStatus",
]
