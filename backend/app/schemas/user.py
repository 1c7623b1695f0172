"""
Pydantic schemas for signup/login request and response shapes.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    # admin is accepted here so the service can reject it with INVALID_ROLE
    role: UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    email: str
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class SignupResponse(BaseModel):
    message: str = "User created successfully"
    user: UserResponse


class LoginUser(BaseModel):
    id: int
    role: UserRole

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
