"""
Experience model: a host-owned, bookable listing.

Status lifecycle: draft -> published (owner or admin) -> blocked (admin).
Listings are created as drafts and never deleted.
"""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class ExperienceStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    BLOCKED = "blocked"


class Experience(Base, TimestampMixin):
    __tablename__ = "experiences"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ExperienceStatus.DRAFT.value)

    # Relationships
    host = relationship("User", back_populates="experiences", lazy="raise")
    bookings = relationship("Booking", back_populates="experience", lazy="raise")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_experience_price_non_negative"),
        CheckConstraint(
            "status IN ('draft', 'published', 'blocked')",
            name="check_experience_status",
        ),
        # Public listing always filters on status and orders by start_time
        Index("ix_experiences_status_start_time", "status", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<Experience(id={self.id}, title={self.title}, status={self.status})>"
