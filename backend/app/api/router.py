"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import auth, experiences, bookings, health

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(experiences.router)
api_router.include_router(bookings.router)
api_router.include_router(health.router)
