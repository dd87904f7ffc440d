"""Permission catalog: the vocabulary of grantable capabilities."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from permission_engine.models.permission import Permission
from permission_engine.services.audit import AuditService


class CatalogError(Exception):
    """Base class for permission catalog errors."""


class PermissionNotFoundError(CatalogError):
    """Raised when a permission id or name does not exist."""


class DuplicatePermissionNameError(CatalogError):
    """Raised when a permission name is already taken by another entry."""


class DuplicateResourceActionError(CatalogError):
    """Raised when a (resource, action) pair is already defined."""


class PermissionCatalog:
    """Creates, updates and deactivates catalog entries.

    Entries are never deleted so grants that reference them stay auditable.
    """

    def __init__(self, session: Session, audit_service: Optional[AuditService] = None) -> None:
        self._session = session
        self._audit = audit_service or AuditService(session)
        self._logger = logging.getLogger("permission_engine.services.catalog")

    def create_permission(
        self,
        name: str,
        description: Optional[str],
        resource: str,
        action: str,
        *,
        actor_id: Optional[int] = None,
    ) -> Permission:
        if self.get_by_name(name) is not None:
            raise DuplicatePermissionNameError(f"Permission with name '{name}' already exists")
        if self._find_by_resource_action(resource, action) is not None:
            raise DuplicateResourceActionError(
                f"Permission for resource '{resource}' and action '{action}' already exists"
            )

        permission = Permission(
            name=name,
            description=description,
            resource=resource,
            action=action,
            is_active=True,
        )
        try:
            with self._session.begin_nested():
                self._session.add(permission)
                self._session.flush()
        except IntegrityError as exc:
            if self.get_by_name(name) is not None:
                raise DuplicatePermissionNameError(f"Permission with name '{name}' already exists") from exc
            raise DuplicateResourceActionError(
                f"Permission for resource '{resource}' and action '{action}' already exists"
            ) from exc

        self._audit.record(
            action="permission.create",
            actor_id=actor_id,
            subject_type="permission",
            subject_id=permission.id,
            details={"name": name, "resource": resource, "action": action},
        )
        self._logger.info(
            "permission_created",
            extra={"permission_id": permission.id, "permission": permission.full_permission, "actor_id": actor_id},
        )
        return permission

    def update_permission(
        self,
        permission_id: int,
        name: str,
        description: Optional[str],
        resource: str,
        action: str,
        *,
        actor_id: Optional[int] = None,
    ) -> Permission:
        permission = self.get(permission_id)

        if name != permission.name:
            clash = self.get_by_name(name)
            if clash is not None and clash.id != permission.id:
                raise DuplicatePermissionNameError(f"Permission with name '{name}' already exists")
        if (resource, action) != (permission.resource, permission.action):
            clash = self._find_by_resource_action(resource, action)
            if clash is not None and clash.id != permission.id:
                raise DuplicateResourceActionError(
                    f"Permission for resource '{resource}' and action '{action}' already exists"
                )

        before = {
            "name": permission.name,
            "description": permission.description,
            "resource": permission.resource,
            "action": permission.action,
        }
        permission.name = name
        permission.description = description
        permission.resource = resource
        permission.action = action
        self._session.add(permission)
        self._session.flush()

        self._audit.record(
            action="permission.update",
            actor_id=actor_id,
            subject_type="permission",
            subject_id=permission.id,
            details={
                "before": before,
                "after": {"name": name, "description": description, "resource": resource, "action": action},
            },
        )
        self._logger.info(
            "permission_updated",
            extra={"permission_id": permission.id, "permission": permission.full_permission, "actor_id": actor_id},
        )
        return permission

    def deactivate_permission(self, permission_id: int, *, actor_id: Optional[int] = None) -> Permission:
        """Mark a permission inactive; calling it on an inactive entry changes nothing."""

        permission = self.get(permission_id)
        if not permission.is_active:
            self._logger.debug("permission_already_inactive", extra={"permission_id": permission.id})
            return permission

        permission.is_active = False
        self._session.add(permission)
        self._session.flush()

        self._audit.record(
            action="permission.deactivate",
            actor_id=actor_id,
            subject_type="permission",
            subject_id=permission.id,
            details={"name": permission.name},
        )
        self._logger.info(
            "permission_deactivated",
            extra={"permission_id": permission.id, "permission": permission.full_permission, "actor_id": actor_id},
        )
        return permission

    def get(self, permission_id: int) -> Permission:
        permission = self.get_by_id(permission_id)
        if permission is None:
            raise PermissionNotFoundError(f"Permission not found with id: {permission_id}")
        return permission

    def get_by_id(self, permission_id: int) -> Optional[Permission]:
        return self._session.get(Permission, permission_id)

    def get_by_name(self, name: str) -> Optional[Permission]:
        return self._session.scalar(select(Permission).where(Permission.name == name))

    def list_all(self) -> List[Permission]:
        return list(self._session.scalars(select(Permission).order_by(Permission.resource, Permission.action)))

    def list_active(self) -> List[Permission]:
        stmt = select(Permission).where(Permission.is_active.is_(True)).order_by(Permission.resource, Permission.action)
        return list(self._session.scalars(stmt))

    def list_by_resource(self, resource: str) -> List[Permission]:
        stmt = (
            select(Permission)
            .where(Permission.resource == resource)
            .where(Permission.is_active.is_(True))
            .order_by(Permission.action)
        )
        return list(self._session.scalars(stmt))

    def search(self, term: str) -> List[Permission]:
        stmt = (
            select(Permission)
            .where(
                or_(
                    Permission.name.icontains(term, autoescape=True),
                    Permission.description.icontains(term, autoescape=True),
                )
            )
            .order_by(Permission.name)
        )
        return list(self._session.scalars(stmt))

    def _find_by_resource_action(self, resource: str, action: str) -> Optional[Permission]:
        stmt = select(Permission).where(Permission.resource == resource).where(Permission.action == action)
        return self._session.scalar(stmt)
