"""Startup seeding of the system catalog and default grants."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from permission_engine.core.config import AppSettings
from permission_engine.models.permissions_constants import (
    DEFAULT_ROLE_PERMISSIONS,
    SYSTEM_PERMISSIONS,
    PermissionDefinition,
)
from permission_engine.models.user import User, UserRole
from permission_engine.services.authorization import AlreadyGrantedError, AuthorizationEngine
from permission_engine.services.users import SqlUserDirectory


@dataclass
class BootstrapReport:
    permissions_created: int = 0
    grants_created: int = 0


class BootstrapSeeder:
    """Idempotently installs the system catalog and default user grants.

    Bootstrap users are granted their role's defaults as self-granted
    entries, matching how an empty installation gets its first admin.
    """

    def __init__(self, engine: AuthorizationEngine, users: SqlUserDirectory) -> None:
        self._engine = engine
        self._catalog = engine.catalog
        self._users = users
        self._logger = logging.getLogger("permission_engine.services.bootstrap")

    def run(self, settings: AppSettings) -> BootstrapReport:
        report = BootstrapReport()
        report.permissions_created = self.ensure_catalog(SYSTEM_PERMISSIONS)

        bootstrap_users = (
            (settings.bootstrap_admin_username, UserRole.ADMIN),
            (settings.bootstrap_shop_username, UserRole.SHOP),
            (settings.bootstrap_customer_username, UserRole.CUSTOMER),
        )
        for username, role in bootstrap_users:
            user = self._find_user(username)
            if user is None:
                continue
            report.grants_created += self.assign_defaults(user, DEFAULT_ROLE_PERMISSIONS[role])

        self._logger.info(
            "bootstrap_completed",
            extra={"permissions_created": report.permissions_created, "grants_created": report.grants_created},
        )
        return report

    def ensure_catalog(self, definitions: Iterable[PermissionDefinition]) -> int:
        created = 0
        for definition in definitions:
            if self._catalog.get_by_name(definition.name) is not None:
                continue
            self._catalog.create_permission(
                definition.name,
                definition.description,
                definition.resource,
                definition.action,
            )
            created += 1
        return created

    def assign_defaults(self, user: User, permission_names: Iterable[str]) -> int:
        created = 0
        for name in permission_names:
            permission = self._catalog.get_by_name(name)
            if permission is None:
                self._logger.warning("bootstrap_permission_missing", extra={"permission_name": name})
                continue
            if not permission.is_active or self._engine.has_permission_by_name(user.id, name):
                continue
            try:
                self._engine.grant(user.id, permission.id, granted_by=user.id)
            except AlreadyGrantedError:
                continue
            created += 1
        return created

    def _find_user(self, username: Optional[str]) -> Optional[User]:
        if not username:
            return None
        user = self._users.find_by_username(username)
        if user is None:
            self._logger.warning("bootstrap_user_missing", extra={"username": username})
        return user
