"""Audit logging service."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from permission_engine.models.audit_log import AuditLog


class AuditService:
    """Persists audit entries and mirrors them to structured logs."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._logger = logging.getLogger("permission_engine.audit")

    def record(
        self,
        *,
        action: str,
        actor_id: Optional[int],
        subject_type: Optional[str] = None,
        subject_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        entry = AuditLog(
            action=action,
            actor_id=actor_id,
            subject_type=subject_type,
            subject_id=subject_id,
            details=details or {},
        )
        self._session.add(entry)
        self._session.flush()

        self._logger.info(
            "audit_event",
            extra={
                "audit_id": entry.id,
                "action": action,
                "actor_id": actor_id,
                "subject_type": subject_type,
                "subject_id": subject_id,
            },
        )
        return entry

    def list_entries(
        self,
        *,
        subject_type: Optional[str] = None,
        subject_id: Optional[int] = None,
        action: Optional[str] = None,
    ) -> List[AuditLog]:
        stmt = select(AuditLog)
        if subject_type:
            stmt = stmt.where(AuditLog.subject_type == subject_type)
        if subject_id is not None:
            stmt = stmt.where(AuditLog.subject_id == subject_id)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        return list(self._session.scalars(stmt.order_by(AuditLog.id)))
