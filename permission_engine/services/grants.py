"""Grant persistence queries."""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.orm import Session, joinedload

from permission_engine.models.grant import PermissionGrant
from permission_engine.models.permission import Permission


def _unexpired(now: datetime) -> ColumnElement[bool]:
    return or_(PermissionGrant.expires_at.is_(None), PermissionGrant.expires_at > now)


def _effective(now: datetime) -> ColumnElement[bool]:
    return and_(PermissionGrant.is_active.is_(True), _unexpired(now))


class GrantStore:
    """Reads and writes ``user_permissions`` rows.

    Every query that answers "does the user hold this" applies the expiry
    predicate against ``now`` itself; nothing here relies on the sweep having
    deactivated stale rows.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, grant: PermissionGrant) -> PermissionGrant:
        self._session.add(grant)
        self._session.flush()
        return grant

    def find_active(self, user_id: int, permission_id: int) -> Optional[PermissionGrant]:
        """Return the active row for the pair, expired or not."""

        stmt = (
            select(PermissionGrant)
            .where(PermissionGrant.user_id == user_id)
            .where(PermissionGrant.permission_id == permission_id)
            .where(PermissionGrant.is_active.is_(True))
        )
        return self._session.scalar(stmt)

    def find_effective(self, user_id: int, permission_id: int, now: datetime) -> Optional[PermissionGrant]:
        stmt = (
            select(PermissionGrant)
            .where(PermissionGrant.user_id == user_id)
            .where(PermissionGrant.permission_id == permission_id)
            .where(_effective(now))
        )
        return self._session.scalar(stmt)

    def has_effective(self, user_id: int, resource: str, action: str, now: datetime) -> bool:
        stmt = (
            select(PermissionGrant.id)
            .join(Permission, PermissionGrant.permission_id == Permission.id)
            .where(PermissionGrant.user_id == user_id)
            .where(Permission.resource == resource)
            .where(Permission.action == action)
            .where(Permission.is_active.is_(True))
            .where(_effective(now))
            .limit(1)
        )
        return self._session.scalar(stmt) is not None

    def iter_effective_permissions(self, user_id: int, now: datetime) -> Iterator[Permission]:
        stmt = (
            select(Permission)
            .join(PermissionGrant, PermissionGrant.permission_id == Permission.id)
            .where(PermissionGrant.user_id == user_id)
            .where(Permission.is_active.is_(True))
            .where(_effective(now))
            .order_by(Permission.resource, Permission.action)
        )
        for permission in self._session.scalars(stmt):
            yield permission

    def list_for_user(self, user_id: int, *, include_inactive: bool = False) -> List[PermissionGrant]:
        stmt = (
            select(PermissionGrant)
            .options(joinedload(PermissionGrant.permission))
            .where(PermissionGrant.user_id == user_id)
        )
        if not include_inactive:
            stmt = stmt.where(PermissionGrant.is_active.is_(True))
        return list(self._session.scalars(stmt.order_by(PermissionGrant.granted_at.desc(), PermissionGrant.id.desc())))

    def list_for_permission(self, permission_id: int) -> List[PermissionGrant]:
        stmt = (
            select(PermissionGrant)
            .where(PermissionGrant.permission_id == permission_id)
            .order_by(PermissionGrant.id)
        )
        return list(self._session.scalars(stmt))

    def find_expired_active(self, now: datetime, *, user_id: Optional[int] = None) -> List[PermissionGrant]:
        stmt = (
            select(PermissionGrant)
            .where(PermissionGrant.is_active.is_(True))
            .where(PermissionGrant.expires_at.is_not(None))
            .where(PermissionGrant.expires_at <= now)
        )
        if user_id is not None:
            stmt = stmt.where(PermissionGrant.user_id == user_id)
        return list(self._session.scalars(stmt.order_by(PermissionGrant.id)))
