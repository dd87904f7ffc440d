"""Decision evaluator invoked by authorization checkpoints.

Checkpoints describe what they need as a permission reference:

* ``ByName("Manage Shops")`` - a catalog entry by its name.
* ``ByResourceAction("shops", "manage")`` - a resource/action pair.
* ``ByInstance("shops", 7, "edit")`` - an instance-scoped check, resolved as
  resource ``"shops:7"``. Ownership of the instance is the caller's concern.

``parse_reference`` turns the string convention used at call sites into one
of these: ``"resource:action"`` with exactly two non-empty segments is a
resource/action pair, anything else is a permission name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from permission_engine.services.authorization import AuthorizationEngine

REFERENCE_SEPARATOR = ":"


class EvaluationError(Exception):
    """Base class for decision evaluator errors."""


class InvalidContextError(EvaluationError):
    """Raised when no user is supplied or the reference is malformed."""


@dataclass(frozen=True)
class ByName:
    name: str


@dataclass(frozen=True)
class ByResourceAction:
    resource: str
    action: str


@dataclass(frozen=True)
class ByInstance:
    resource_type: str
    resource_id: Union[int, str]
    action: str

    @property
    def resource(self) -> str:
        return f"{self.resource_type}{REFERENCE_SEPARATOR}{self.resource_id}"


PermissionReference = Union[ByName, ByResourceAction, ByInstance]


class DecisionOutcome(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Decision:
    outcome: DecisionOutcome
    reference: PermissionReference
    resource: Optional[str] = None
    action: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is DecisionOutcome.ALLOWED


def parse_reference(raw: str) -> PermissionReference:
    if raw is None or not raw.strip():
        raise InvalidContextError("Permission reference must be a non-empty string")
    value = raw.strip()
    segments = value.split(REFERENCE_SEPARATOR)
    if len(segments) == 2 and all(segment.strip() for segment in segments):
        return ByResourceAction(resource=segments[0].strip(), action=segments[1].strip())
    return ByName(name=value)


class DecisionEvaluator:
    """Resolves permission references into allow/deny answers."""

    def __init__(self, engine: AuthorizationEngine) -> None:
        self._engine = engine
        self._logger = logging.getLogger("permission_engine.services.evaluator")

    def decide(self, user_id: Optional[int], reference: Union[PermissionReference, str]) -> bool:
        return self.evaluate(user_id, reference).allowed

    def evaluate(self, user_id: Optional[int], reference: Union[PermissionReference, str]) -> Decision:
        if user_id is None:
            raise InvalidContextError("Authorization requires an authenticated user")
        if isinstance(reference, str):
            reference = parse_reference(reference)

        if isinstance(reference, ByName):
            self._require_parts(reference.name)
            return self._evaluate_name(user_id, reference)
        if isinstance(reference, ByResourceAction):
            self._require_parts(reference.resource, reference.action)
            return self._evaluate_pair(user_id, reference, reference.resource, reference.action)
        if isinstance(reference, ByInstance):
            if reference.resource_id is None:
                raise InvalidContextError("Instance reference requires a resource id")
            self._require_parts(reference.resource_type, str(reference.resource_id), reference.action)
            return self._evaluate_pair(user_id, reference, reference.resource, reference.action)
        raise InvalidContextError(f"Unsupported permission reference: {reference!r}")

    def can_access_resource(self, user_id: Optional[int], resource: str, action: str) -> bool:
        return self.decide(user_id, ByResourceAction(resource, action))

    def can_view_shops(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "shops", "view")

    def can_create_shops(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "shops", "create")

    def can_edit_shops(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "shops", "edit")

    def can_delete_shops(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "shops", "delete")

    def can_manage_users(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "users", "manage")

    def can_manage_permissions(self, user_id: Optional[int]) -> bool:
        return self.can_access_resource(user_id, "permissions", "manage")

    def can_view_dashboard(self, user_id: Optional[int], dashboard_type: str) -> bool:
        return self.can_access_resource(user_id, "dashboard", dashboard_type)

    def _evaluate_name(self, user_id: int, reference: ByName) -> Decision:
        permission = self._engine.catalog.get_by_name(reference.name)
        if permission is None:
            self._logger.warning(
                "permission_reference_unresolved",
                extra={"user_id": user_id, "permission_name": reference.name},
            )
            return Decision(outcome=DecisionOutcome.UNRESOLVED, reference=reference)
        return self._evaluate_pair(user_id, reference, permission.resource, permission.action)

    def _evaluate_pair(self, user_id: int, reference: PermissionReference, resource: str, action: str) -> Decision:
        allowed = self._engine.has_permission(user_id, resource, action)
        outcome = DecisionOutcome.ALLOWED if allowed else DecisionOutcome.DENIED
        self._logger.info(
            "authorization_decision",
            extra={"user_id": user_id, "resource": resource, "action": action, "outcome": outcome.value},
        )
        return Decision(outcome=outcome, reference=reference, resource=resource, action=action)

    @staticmethod
    def _require_parts(*parts: str) -> None:
        if not all(part and part.strip() for part in parts):
            raise InvalidContextError("Permission reference has an empty resource or action")
