"""Permission catalog endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from permission_engine.api.dependencies import get_catalog, require_permission_manager
from permission_engine.schemas.permission import PermissionCreate, PermissionResponse, PermissionUpdate
from permission_engine.services.catalog import PermissionCatalog, PermissionNotFoundError

router = APIRouter()


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_permission(
    payload: PermissionCreate,
    catalog: PermissionCatalog = Depends(get_catalog),
    actor_id: int = Depends(require_permission_manager),
) -> PermissionResponse:
    permission = catalog.create_permission(
        payload.name,
        payload.description,
        payload.resource,
        payload.action,
        actor_id=actor_id,
    )
    return PermissionResponse.model_validate(permission)


@router.get(
    "",
    response_model=List[PermissionResponse],
)
def list_permissions(
    active_only: bool = Query(default=False),
    resource: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, min_length=1),
    catalog: PermissionCatalog = Depends(get_catalog),
    _: int = Depends(require_permission_manager),
) -> List[PermissionResponse]:
    if q:
        permissions = catalog.search(q)
    elif resource:
        permissions = catalog.list_by_resource(resource)
    elif active_only:
        permissions = catalog.list_active()
    else:
        permissions = catalog.list_all()
    return [PermissionResponse.model_validate(permission) for permission in permissions]


@router.get(
    "/by-name/{name}",
    response_model=PermissionResponse,
)
def get_permission_by_name(
    name: str,
    catalog: PermissionCatalog = Depends(get_catalog),
    _: int = Depends(require_permission_manager),
) -> PermissionResponse:
    permission = catalog.get_by_name(name)
    if permission is None:
        raise PermissionNotFoundError(f"Permission not found with name: {name}")
    return PermissionResponse.model_validate(permission)


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
)
def get_permission(
    permission_id: int,
    catalog: PermissionCatalog = Depends(get_catalog),
    _: int = Depends(require_permission_manager),
) -> PermissionResponse:
    return PermissionResponse.model_validate(catalog.get(permission_id))


@router.put(
    "/{permission_id}",
    response_model=PermissionResponse,
)
def update_permission(
    permission_id: int,
    payload: PermissionUpdate,
    catalog: PermissionCatalog = Depends(get_catalog),
    actor_id: int = Depends(require_permission_manager),
) -> PermissionResponse:
    permission = catalog.update_permission(
        permission_id,
        payload.name,
        payload.description,
        payload.resource,
        payload.action,
        actor_id=actor_id,
    )
    return PermissionResponse.model_validate(permission)


@router.post(
    "/{permission_id}/deactivate",
    response_model=PermissionResponse,
)
def deactivate_permission(
    permission_id: int,
    catalog: PermissionCatalog = Depends(get_catalog),
    actor_id: int = Depends(require_permission_manager),
) -> PermissionResponse:
    permission = catalog.deactivate_permission(permission_id, actor_id=actor_id)
    return PermissionResponse.model_validate(permission)
