"""SQLAlchemy ORM models for the permission engine."""

from permission_engine.models.base import Base  # noqa: F401
from permission_engine.models.audit_log import AuditLog  # noqa: F401
from permission_engine.models.grant import PermissionGrant  # noqa: F401
from permission_engine.models.permission import Permission  # noqa: F401
from permission_engine.models.user import User, UserRole  # noqa: F401
