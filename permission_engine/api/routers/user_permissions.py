"""Per-user grant, revoke and listing endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status

from permission_engine.api.dependencies import get_authorization_engine, require_permission_manager
from permission_engine.core.config import get_settings
from permission_engine.models.grant import PermissionGrant
from permission_engine.schemas.grant import (
    BulkFailureResponse,
    BulkGrantRequest,
    BulkResultResponse,
    BulkRevokeRequest,
    EffectivePermissionsResponse,
    GrantCreate,
    GrantResponse,
    GrantRevoke,
)
from permission_engine.schemas.permission import PermissionResponse
from permission_engine.services.authorization import AuthorizationEngine, BulkResult

router = APIRouter()


@router.post(
    "/grant",
    response_model=GrantResponse,
    status_code=status.HTTP_201_CREATED,
)
def grant_permission(
    user_id: int,
    payload: GrantCreate,
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    actor_id: int = Depends(require_permission_manager),
) -> GrantResponse:
    grant = engine.grant(user_id, payload.permission_id, actor_id, payload.expires_at)
    return _to_grant_response(grant)


@router.post(
    "/revoke",
    response_model=GrantResponse,
)
def revoke_permission(
    user_id: int,
    payload: GrantRevoke,
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    actor_id: int = Depends(require_permission_manager),
) -> GrantResponse:
    grant = engine.revoke(user_id, payload.permission_id, actor_id, payload.reason)
    return _to_grant_response(grant)


@router.post(
    "/bulk-grant",
    response_model=BulkResultResponse,
)
def bulk_grant_permissions(
    user_id: int,
    payload: BulkGrantRequest,
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    actor_id: int = Depends(require_permission_manager),
) -> BulkResultResponse:
    result = engine.grant_multiple(user_id, payload.permission_ids, actor_id)
    return _to_bulk_response(result)


@router.post(
    "/bulk-revoke",
    response_model=BulkResultResponse,
)
def bulk_revoke_permissions(
    user_id: int,
    payload: BulkRevokeRequest,
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    actor_id: int = Depends(require_permission_manager),
) -> BulkResultResponse:
    result = engine.revoke_multiple(user_id, payload.permission_ids, actor_id, payload.reason)
    return _to_bulk_response(result)


@router.get(
    "",
    response_model=EffectivePermissionsResponse,
)
def list_effective_permissions(
    user_id: int,
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    _: int = Depends(require_permission_manager),
) -> EffectivePermissionsResponse:
    if get_settings().sweep_on_read:
        engine.sweep_expired(user_id=user_id)
    permissions = [PermissionResponse.model_validate(permission) for permission in engine.effective_permissions(user_id)]
    return EffectivePermissionsResponse(user_id=user_id, permissions=permissions)


@router.get(
    "/grants",
    response_model=List[GrantResponse],
)
def list_user_grants(
    user_id: int,
    include_inactive: bool = Query(default=False),
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    _: int = Depends(require_permission_manager),
) -> List[GrantResponse]:
    grants = engine.list_grants(user_id, include_inactive=include_inactive)
    return [_to_grant_response(grant) for grant in grants]


def _to_grant_response(grant: PermissionGrant) -> GrantResponse:
    return GrantResponse(
        id=grant.id,
        user_id=grant.user_id,
        permission_id=grant.permission_id,
        permission_name=grant.permission.name,
        full_permission=grant.permission.full_permission,
        granted_by=grant.granted_by,
        granted_at=grant.granted_at,
        expires_at=grant.expires_at,
        is_active=grant.is_active,
        revoked_by=grant.revoked_by,
        revoked_at=grant.revoked_at,
        revocation_reason=grant.revocation_reason,
    )


def _to_bulk_response(result: BulkResult) -> BulkResultResponse:
    return BulkResultResponse(
        succeeded=result.succeeded,
        failed=[
            BulkFailureResponse(
                permission_id=failure.permission_id,
                error=type(failure.error).__name__,
                detail=str(failure.error),
            )
            for failure in result.failed
        ],
    )
