"""Authorization engine: grants, revocations and the effective-permission check."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from permission_engine.core.timeutils import Clock, ensure_utc, utcnow
from permission_engine.models.grant import PermissionGrant
from permission_engine.models.permission import Permission
from permission_engine.services.audit import AuditService
from permission_engine.services.catalog import CatalogError, PermissionCatalog
from permission_engine.services.grants import GrantStore
from permission_engine.services.users import SqlUserDirectory, UserDirectory


class AuthorizationError(Exception):
    """Base class for grant and revocation errors."""


class UserNotFoundError(AuthorizationError):
    """Raised when the target user is unknown to the user directory."""


class PermissionInactiveError(AuthorizationError):
    """Raised when granting a deactivated permission."""


class AlreadyGrantedError(AuthorizationError):
    """Raised when the user already effectively holds the permission."""


class NotGrantedError(AuthorizationError):
    """Raised when revoking a permission the user does not effectively hold."""


class InvalidExpirationError(AuthorizationError):
    """Raised when a grant would expire at or before the moment it is created."""


@dataclass
class BulkFailure:
    permission_id: int
    error: Exception


@dataclass
class BulkResult:
    """Outcome of a bulk grant or revoke; failures never abort the batch."""

    succeeded: List[int] = field(default_factory=list)
    failed: List[BulkFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class AuthorizationEngine:
    """Answers whether a user currently holds a capability, and manages grants.

    ``has_permission`` evaluates expiry live on every call. ``sweep_expired``
    only tidies the active set; correctness never depends on it.
    """

    def __init__(
        self,
        session: Session,
        *,
        catalog: Optional[PermissionCatalog] = None,
        users: Optional[UserDirectory] = None,
        audit_service: Optional[AuditService] = None,
        clock: Clock = utcnow,
    ) -> None:
        self._session = session
        self._audit = audit_service or AuditService(session)
        self._catalog = catalog or PermissionCatalog(session, audit_service=self._audit)
        self._users = users or SqlUserDirectory(session)
        self._grants = GrantStore(session)
        self._clock = clock
        self._logger = logging.getLogger("permission_engine.services.authorization")

    @property
    def catalog(self) -> PermissionCatalog:
        return self._catalog

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def grant(
        self,
        user_id: int,
        permission_id: int,
        granted_by: int,
        expires_at: Optional[datetime] = None,
    ) -> PermissionGrant:
        self._require_user(user_id)
        permission = self._catalog.get(permission_id)
        if not permission.is_active:
            raise PermissionInactiveError(f"Cannot grant inactive permission: {permission.name}")

        now = self.now()
        expires_at = ensure_utc(expires_at)
        if expires_at is not None and expires_at <= now:
            raise InvalidExpirationError(
                f"Expiration {expires_at.isoformat()} is not in the future for permission {permission.name}"
            )

        current = self._grants.find_active(user_id, permission_id)
        if current is not None:
            if current.is_effective(now):
                raise AlreadyGrantedError(f"User already has this permission: {permission.name}")
            # Stale row past its expiry; retire it so the partial unique index admits the new grant.
            current.is_active = False
            self._session.flush()

        grant = PermissionGrant(
            user_id=user_id,
            permission_id=permission.id,
            granted_by=granted_by,
            granted_at=now,
            expires_at=expires_at,
            is_active=True,
        )
        # A unique-index violation rolls back only this savepoint.
        try:
            with self._session.begin_nested():
                self._grants.add(grant)
        except IntegrityError as exc:
            raise AlreadyGrantedError(f"User already has this permission: {permission.name}") from exc

        self._audit.record(
            action="grant.create",
            actor_id=granted_by,
            subject_type="user",
            subject_id=user_id,
            details={
                "grant_id": grant.id,
                "permission_id": permission.id,
                "permission": permission.full_permission,
                "expires_at": expires_at.isoformat() if expires_at else None,
            },
        )
        self._logger.info(
            "permission_granted",
            extra={
                "user_id": user_id,
                "permission": permission.full_permission,
                "granted_by": granted_by,
                "expires_at": expires_at,
            },
        )
        return grant

    def revoke(
        self,
        user_id: int,
        permission_id: int,
        revoked_by: int,
        reason: Optional[str] = None,
    ) -> PermissionGrant:
        self._require_user(user_id)
        permission = self._catalog.get(permission_id)

        now = self.now()
        grant = self._grants.find_effective(user_id, permission_id, now)
        if grant is None:
            raise NotGrantedError(f"User does not have this permission: {permission.name}")

        grant.revoke(revoked_by, reason, now)
        self._session.flush()

        self._audit.record(
            action="grant.revoke",
            actor_id=revoked_by,
            subject_type="user",
            subject_id=user_id,
            details={
                "grant_id": grant.id,
                "permission_id": permission.id,
                "permission": permission.full_permission,
                "reason": reason,
            },
        )
        self._logger.info(
            "permission_revoked",
            extra={
                "user_id": user_id,
                "permission": permission.full_permission,
                "revoked_by": revoked_by,
                "reason": reason,
            },
        )
        return grant

    def has_permission(self, user_id: int, resource: str, action: str) -> bool:
        allowed = self._grants.has_effective(user_id, resource, action, self.now())
        self._logger.debug(
            "authorization_granted" if allowed else "authorization_denied",
            extra={"user_id": user_id, "resource": resource, "action": action},
        )
        return allowed

    def has_permission_by_name(self, user_id: int, permission_name: str) -> bool:
        permission = self._catalog.get_by_name(permission_name)
        if permission is None:
            return False
        return self.has_permission(user_id, permission.resource, permission.action)

    def effective_permissions(self, user_id: int) -> Iterator[Permission]:
        """Return a single-pass iterator over the user's effective permissions.

        The user is validated immediately; rows are fetched on first iteration.
        """

        self._require_user(user_id)
        return self._grants.iter_effective_permissions(user_id, self.now())

    def effective_permission_strings(self, user_id: int) -> Set[str]:
        return {permission.full_permission for permission in self.effective_permissions(user_id)}

    def list_grants(self, user_id: int, *, include_inactive: bool = False) -> List[PermissionGrant]:
        self._require_user(user_id)
        return self._grants.list_for_user(user_id, include_inactive=include_inactive)

    def list_permission_holders(self, permission_id: int) -> List[PermissionGrant]:
        self._catalog.get(permission_id)
        return self._grants.list_for_permission(permission_id)

    def grant_multiple(self, user_id: int, permission_ids: Iterable[int], granted_by: int) -> BulkResult:
        result = BulkResult()
        for permission_id in permission_ids:
            try:
                self.grant(user_id, permission_id, granted_by)
            except (AuthorizationError, CatalogError) as exc:
                self._logger.warning(
                    "bulk_grant_item_failed",
                    extra={"user_id": user_id, "permission_id": permission_id, "error": str(exc)},
                )
                result.failed.append(BulkFailure(permission_id=permission_id, error=exc))
            else:
                result.succeeded.append(permission_id)
        return result

    def revoke_multiple(
        self,
        user_id: int,
        permission_ids: Iterable[int],
        revoked_by: int,
        reason: Optional[str] = None,
    ) -> BulkResult:
        result = BulkResult()
        for permission_id in permission_ids:
            try:
                self.revoke(user_id, permission_id, revoked_by, reason)
            except (AuthorizationError, CatalogError) as exc:
                self._logger.warning(
                    "bulk_revoke_item_failed",
                    extra={"user_id": user_id, "permission_id": permission_id, "error": str(exc)},
                )
                result.failed.append(BulkFailure(permission_id=permission_id, error=exc))
            else:
                result.succeeded.append(permission_id)
        return result

    def sweep_expired(self, now: Optional[datetime] = None, *, user_id: Optional[int] = None) -> int:
        """Deactivate active grants whose expiry has passed. Returns the count."""

        now = ensure_utc(now) or self.now()
        expired = self._grants.find_expired_active(now, user_id=user_id)
        for grant in expired:
            grant.is_active = False
        if not expired:
            return 0

        self._session.flush()
        self._audit.record(
            action="grant.sweep",
            actor_id=None,
            subject_type="user" if user_id is not None else None,
            subject_id=user_id,
            details={"grant_ids": [grant.id for grant in expired], "swept_at": now.isoformat()},
        )
        self._logger.info("expired_grants_swept", extra={"count": len(expired), "user_id": user_id})
        return len(expired)

    def _require_user(self, user_id: int) -> None:
        if not self._users.exists(user_id):
            raise UserNotFoundError(f"User not found with id: {user_id}")
