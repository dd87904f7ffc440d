"""Permission catalog schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=512)
    resource: str = Field(..., min_length=1, max_length=120, pattern=r"^[^\s]+$")
    action: str = Field(..., min_length=1, max_length=64, pattern=r"^[^\s:]+$")


class PermissionUpdate(PermissionCreate):
    pass


class PermissionResponse(PermissionCreate):
    id: int
    is_active: bool
    full_permission: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
