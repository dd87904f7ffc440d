"""Catalog entry describing a grantable capability."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Boolean, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from permission_engine.models.base import Base, TimestampMixin


class Permission(TimestampMixin, Base):
    """A named capability identified by a (resource, action) pair."""

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("name", name="uq_permissions_name"),
        UniqueConstraint("resource", "action", name="uq_permissions_resource_action"),
        Index("ix_permissions_resource", "resource"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(length=120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(length=512), nullable=True)
    resource: Mapped[str] = mapped_column(String(length=120), nullable=False)
    action: Mapped[str] = mapped_column(String(length=64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    grants: Mapped[List["PermissionGrant"]] = relationship(
        "PermissionGrant",
        back_populates="permission",
    )

    @property
    def full_permission(self) -> str:
        return f"{self.resource}:{self.action}"

    def __repr__(self) -> str:
        return f"Permission(id={self.id!r}, name={self.name!r}, {self.full_permission}, active={self.is_active})"
