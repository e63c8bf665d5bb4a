# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class ChangeRoleRequest(BaseModel):
    role: Literal["admin", "user"]


# -- Responses -------------------------------------------------------------


class UserRow(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    login_method: Optional[str] = None
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: List[UserRow]


# -- Audit log responses ---------------------------------------------------


class AuditLogRow(BaseModel):
    id: int
    actor_email: Optional[str] = None       # resolved from actor_id
    target_email: Optional[str] = None      # resolved from target_user_id
    action: str
    detail: Optional[str] = None
    request_ip: Optional[str] = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    logs: List[AuditLogRow]
