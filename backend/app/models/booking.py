"""
Booking model: a user's seat reservation against a published experience.

Key design decisions:
- Partial unique index allows one *confirmed* booking per user per
  experience while keeping cancelled rows around
- Status field allows cancellation without deleting records
- No capacity ceiling: experiences carry no seat inventory
"""

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    experience_id = Column(Integer, ForeignKey("experiences.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seats = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)

    # Relationships
    user = relationship("User", back_populates="bookings", lazy="raise")
    experience = relationship("Experience", back_populates="bookings", lazy="raise")

    __table_args__ = (
        Index(
            "uq_bookings_confirmed_user_experience",
            "experience_id",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
        CheckConstraint("seats > 0", name="check_booking_seats_positive"),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="check_booking_status"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, experience={self.experience_id}, status={self.status})>"
