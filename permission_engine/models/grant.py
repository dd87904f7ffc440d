"""User/permission association with expiry and revocation metadata."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from permission_engine.core.timeutils import ensure_utc, utcnow
from permission_engine.models.base import Base


class PermissionGrant(Base):
    """Records that a user holds a catalog permission.

    Rows are never deleted. A grant leaves the active set either through
    revocation, which stamps the revoker, time and reason, or through the
    expiration sweep. The partial unique index allows any number of inactive
    rows per (user, permission) but only one active row.
    """

    __tablename__ = "user_permissions"
    __table_args__ = (
        Index("ix_user_permissions_user", "user_id"),
        Index("ix_user_permissions_permission", "permission_id"),
        Index("ix_user_permissions_expires_at", "expires_at"),
        Index(
            "uq_user_permissions_active_pair",
            "user_id",
            "permission_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    permission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("permissions.id"),
        nullable=False,
    )
    granted_by: Mapped[int] = mapped_column(Integer, nullable=False)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    revoked_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    revocation_reason: Mapped[Optional[str]] = mapped_column(String(length=512), nullable=True)

    permission: Mapped["Permission"] = relationship("Permission", back_populates="grants")
    user: Mapped["User"] = relationship("User", back_populates="grants")

    def is_expired(self, now: datetime) -> bool:
        expires_at = ensure_utc(self.expires_at)
        return expires_at is not None and expires_at <= now

    def is_effective(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now)

    def revoke(self, revoked_by: int, reason: Optional[str], now: datetime) -> None:
        self.is_active = False
        self.revoked_by = revoked_by
        self.revoked_at = now
        self.revocation_reason = reason
