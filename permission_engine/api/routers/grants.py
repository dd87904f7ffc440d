"""Grant maintenance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from permission_engine.api.dependencies import get_authorization_engine, require_permission_manager
from permission_engine.schemas.grant import SweepResponse
from permission_engine.services.authorization import AuthorizationEngine

router = APIRouter()


@router.post(
    "/sweep",
    response_model=SweepResponse,
)
def sweep_expired_grants(
    engine: AuthorizationEngine = Depends(get_authorization_engine),
    _: int = Depends(require_permission_manager),
) -> SweepResponse:
    return SweepResponse(deactivated=engine.sweep_expired())
