"""Router registrations."""

from fastapi import APIRouter

from permission_engine.api.routers import decisions, grants, health, permissions, user_permissions


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(permissions.router, prefix="/api/v1/permissions", tags=["permissions"])
    router.include_router(
        user_permissions.router,
        prefix="/api/v1/users/{user_id}/permissions",
        tags=["user-permissions"],
    )
    router.include_router(grants.router, prefix="/api/v1/grants", tags=["grants"])
    router.include_router(decisions.router, prefix="/api/v1/decisions", tags=["decisions"])
    return router
