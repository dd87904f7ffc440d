"""Minimal user identity record consulted by the engine."""

from __future__ import annotations

from enum import Enum
from typing import List

from sqlalchemy import Boolean, Integer, String, UniqueConstraint
from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from permission_engine.models.base import Base, TimestampMixin


class UserRole(str, Enum):
    ADMIN = "admin"
    SHOP = "shop"
    CUSTOMER = "customer"


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("username", name="uq_users_username"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(length=120), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SqlEnum(UserRole, name="user_role", native_enum=False, values_callable=lambda x: [e.value for e in x]),
        default=UserRole.CUSTOMER,
        nullable=False,
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    grants: Mapped[List["PermissionGrant"]] = relationship(
        "PermissionGrant",
        back_populates="user",
    )
