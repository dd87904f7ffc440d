"""Pydantic schemas for API payloads."""

from permission_engine.schemas.decision import DecisionRequest, DecisionResponse, InstanceReference
from permission_engine.schemas.grant import (
    BulkFailureResponse,
    BulkGrantRequest,
    BulkResultResponse,
    BulkRevokeRequest,
    EffectivePermissionsResponse,
    GrantCreate,
    GrantResponse,
    GrantRevoke,
    SweepResponse,
)
from permission_engine.schemas.permission import PermissionCreate, PermissionResponse, PermissionUpdate

__all__ = [
    "BulkFailureResponse",
    "BulkGrantRequest",
    "BulkResultResponse",
    "BulkRevokeRequest",
    "DecisionRequest",
    "DecisionResponse",
    "EffectivePermissionsResponse",
    "GrantCreate",
    "GrantResponse",
    "GrantRevoke",
    "InstanceReference",
    "PermissionCreate",
    "PermissionResponse",
    "PermissionUpdate",
    "SweepResponse",
]
