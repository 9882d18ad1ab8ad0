"""Audit log entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from audit.domain.value_objects import AuditAction, AuditLogId, AuditStatus


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of one audited operation.

    Entries are append-only: once built they are never modified, and the
    store only ever inserts them.

    Attributes:
        action: What was attempted (CREATE, UPDATE, DELETE, LOGIN)
        entity_type: Kind of entity touched (e.g. "Member", "User")
        entity_id: Identifier of the entity, when one exists
        principal: Username of the caller, or "system"
        timestamp: When the operation reached its terminal state
        status: SUCCESS or FAILURE
        error_message: Failure reason for FAILURE entries
        ip_address: Caller address, when the request came over HTTP
        details: Extra structured context (e.g. the terminal pipeline state)
    """

    id: AuditLogId
    action: AuditAction
    entity_type: str
    entity_id: str | None
    principal: str
    timestamp: datetime
    status: AuditStatus
    error_message: str | None = None
    ip_address: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        action: AuditAction,
        entity_type: str,
        entity_id: str | None,
        principal: str,
        timestamp: datetime,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditLogEntry:
        """Build a SUCCESS entry."""
        return cls(
            id=AuditLogId.generate(),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            principal=principal,
            timestamp=timestamp,
            status=AuditStatus.SUCCESS,
            ip_address=ip_address,
            details=dict(details or {}),
        )

    @classmethod
    def failure(
        cls,
        action: AuditAction,
        entity_type: str,
        entity_id: str | None,
        principal: str,
        timestamp: datetime,
        error_message: str,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditLogEntry:
        """Build a FAILURE entry carrying the reason."""
        return cls(
            id=AuditLogId.generate(),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            principal=principal,
            timestamp=timestamp,
            status=AuditStatus.FAILURE,
            error_message=error_message,
            ip_address=ip_address,
            details=dict(details or {}),
        )
