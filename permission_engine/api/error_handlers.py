"""Exception handlers for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from permission_engine.api.dependencies import GuardDeniedError
from permission_engine.services.authorization import (
    AlreadyGrantedError,
    AuthorizationError,
    InvalidExpirationError,
    NotGrantedError,
    PermissionInactiveError,
    UserNotFoundError,
)
from permission_engine.services.catalog import (
    CatalogError,
    DuplicatePermissionNameError,
    DuplicateResourceActionError,
    PermissionNotFoundError,
)
from permission_engine.services.evaluator import InvalidContextError

_STATUS_BY_ERROR: list[tuple[type[Exception], int]] = [
    (PermissionNotFoundError, 404),
    (UserNotFoundError, 404),
    (DuplicatePermissionNameError, 409),
    (DuplicateResourceActionError, 409),
    (AlreadyGrantedError, 409),
    (NotGrantedError, 409),
    (PermissionInactiveError, 400),
    (InvalidExpirationError, 400),
    (InvalidContextError, 401),
    (GuardDeniedError, 403),
    (CatalogError, 400),
    (AuthorizationError, 400),
]


def status_for(exc: Exception) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status_for(exc),
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    for error_type in (CatalogError, AuthorizationError, InvalidContextError, GuardDeniedError):
        app.add_exception_handler(error_type, domain_error_handler)
