"""Grant and revocation schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from permission_engine.schemas.permission import PermissionResponse


class GrantCreate(BaseModel):
    permission_id: int
    expires_at: Optional[datetime] = None


class GrantRevoke(BaseModel):
    permission_id: int
    reason: Optional[str] = Field(default=None, max_length=512)


class BulkGrantRequest(BaseModel):
    permission_ids: List[int] = Field(..., min_length=1)


class BulkRevokeRequest(BulkGrantRequest):
    reason: Optional[str] = Field(default=None, max_length=512)


class GrantResponse(BaseModel):
    id: int
    user_id: int
    permission_id: int
    permission_name: str
    full_permission: str
    granted_by: int
    granted_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool
    revoked_by: Optional[int] = None
    revoked_at: Optional[datetime] = None
    revocation_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BulkFailureResponse(BaseModel):
    permission_id: int
    error: str
    detail: str


class BulkResultResponse(BaseModel):
    succeeded: List[int]
    failed: List[BulkFailureResponse]


class EffectivePermissionsResponse(BaseModel):
    user_id: int
    permissions: List[PermissionResponse]


class SweepResponse(BaseModel):
    deactivated: int
