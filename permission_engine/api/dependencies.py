"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from typing import Iterator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from permission_engine.core.database import get_session
from permission_engine.services.authorization import AuthorizationEngine
from permission_engine.services.catalog import PermissionCatalog
from permission_engine.services.evaluator import DecisionEvaluator, InvalidContextError


def get_db_session() -> Iterator[Session]:
    yield from get_session()


def get_authorization_engine(session: Session = Depends(get_db_session)) -> AuthorizationEngine:
    return AuthorizationEngine(session)


def get_catalog(engine: AuthorizationEngine = Depends(get_authorization_engine)) -> PermissionCatalog:
    return engine.catalog


def get_decision_evaluator(engine: AuthorizationEngine = Depends(get_authorization_engine)) -> DecisionEvaluator:
    return DecisionEvaluator(engine)


def get_actor_id(x_actor_id: Optional[int] = Header(default=None, alias="X-Actor-Id")) -> Optional[int]:
    return x_actor_id


class GuardDeniedError(Exception):
    """Raised when an explicit checkpoint decision comes back negative."""

    def __init__(self, actor_id: int, reference: str) -> None:
        super().__init__(f"User {actor_id} lacks permission '{reference}'")
        self.actor_id = actor_id
        self.reference = reference


def require_permission_manager(
    actor_id: Optional[int] = Depends(get_actor_id),
    evaluator: DecisionEvaluator = Depends(get_decision_evaluator),
) -> int:
    """Checkpoint for administrative routes: the actor must hold permissions:manage."""

    if actor_id is None:
        raise InvalidContextError("X-Actor-Id header is required")
    if not evaluator.can_manage_permissions(actor_id):
        raise GuardDeniedError(actor_id, "permissions:manage")
    return actor_id
