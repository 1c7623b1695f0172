"""
Authentication endpoints: signup and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import error_responses, respond
from app.db.session import get_db
from app.schemas.user import (
    LoginRequest, LoginResponse, LoginUser, SignupRequest, SignupResponse, UserResponse,
)
from app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400),
)
async def signup(payload: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Create a host or user account. Admin cannot be self-assigned."""
    result = await auth_service.signup(db, payload.email, payload.password, payload.role)
    return respond(
        result,
        lambda user: SignupResponse(user=UserResponse.model_validate(user)),
        status.HTTP_201_CREATED,
    )


@router.post("/login", response_model=LoginResponse, responses=error_responses(400, 401))
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange credentials for a 7-day bearer token."""
    result = await auth_service.login(db, payload.email, payload.password)
    return respond(
        result,
        lambda issued: LoginResponse(token=issued.token, user=LoginUser.model_validate(issued.user)),
    )
