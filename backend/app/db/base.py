"""
Declarative base shared by every model, plus common columns.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Creation timestamp filled in by the database."""

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


# Largest value an Integer (int4) column holds
INTEGER_MAX = 2_147_483_647
