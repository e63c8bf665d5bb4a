# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


# -- Requests --------------------------------------------------------------


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: Literal["admin", "user"] = "user"


class UpdatePasswordRequest(BaseModel):
    password: str = Field(min_length=6)


# -- Responses -------------------------------------------------------------


class UserSummary(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool
    user: UserSummary


class UserInfoResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    login_method: Optional[str] = None
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SuccessResponse(BaseModel):
    success: bool
