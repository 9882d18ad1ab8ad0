"""PostgreSQL implementation of IAuditLogRepository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from audit.domain import AuditAction, AuditLogEntry, AuditLogId, AuditStatus
from audit.infrastructure.models import AuditLogModel
from audit.infrastructure.observability import (
    AuditLogRepositoryProbe,
    DefaultAuditLogRepositoryProbe,
)
from audit.ports import IAuditLogRepository


class AuditLogRepository(IAuditLogRepository):
    """Append-only audit store.

    Each call opens its own short-lived session, so the emitter's worker task
    never shares a session with request handlers.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: AuditLogRepositoryProbe | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._probe = probe or DefaultAuditLogRepositoryProbe()

    async def append(self, entry: AuditLogEntry) -> None:
        async with self._session_factory() as session, session.begin():
            session.add(self._to_model(entry))
        self._probe.entry_appended(
            entry.id.value, entry.action.value, entry.status.value
        )

    async def find_by_principal(
        self, principal: str, limit: int = 100
    ) -> list[AuditLogEntry]:
        stmt = select(AuditLogModel).where(AuditLogModel.principal == principal)
        return await self._fetch("by_principal", stmt, limit)

    async def find_by_entity(
        self, entity_type: str, entity_id: str, limit: int = 100
    ) -> list[AuditLogEntry]:
        stmt = select(AuditLogModel).where(
            AuditLogModel.entity_type == entity_type,
            AuditLogModel.entity_id == entity_id,
        )
        return await self._fetch("by_entity", stmt, limit)

    async def find_by_action(
        self, action: AuditAction, limit: int = 100
    ) -> list[AuditLogEntry]:
        stmt = select(AuditLogModel).where(AuditLogModel.action == action.value)
        return await self._fetch("by_action", stmt, limit)

    async def find_by_status(
        self, status: AuditStatus, limit: int = 100
    ) -> list[AuditLogEntry]:
        stmt = select(AuditLogModel).where(AuditLogModel.status == status.value)
        return await self._fetch("by_status", stmt, limit)

    async def find_between(
        self, start: datetime, end: datetime, limit: int = 100
    ) -> list[AuditLogEntry]:
        stmt = select(AuditLogModel).where(
            AuditLogModel.timestamp >= start,
            AuditLogModel.timestamp <= end,
        )
        return await self._fetch("between", stmt, limit)

    async def _fetch(
        self, query: str, stmt: Select[tuple[AuditLogModel]], limit: int
    ) -> list[AuditLogEntry]:
        stmt = stmt.order_by(AuditLogModel.timestamp.desc()).limit(limit)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            entries = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.entries_queried(query, len(entries))
        return entries

    @staticmethod
    def _to_model(entry: AuditLogEntry) -> AuditLogModel:
        return AuditLogModel(
            id=entry.id.value,
            action=entry.action.value,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            principal=entry.principal,
            timestamp=entry.timestamp,
            status=entry.status.value,
            error_message=entry.error_message,
            ip_address=entry.ip_address,
            details=dict(entry.details),
        )

    @staticmethod
    def _to_domain(model: AuditLogModel) -> AuditLogEntry:
        return AuditLogEntry(
            id=AuditLogId(value=model.id),
            action=AuditAction(model.action),
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            principal=model.principal,
            timestamp=model.timestamp,
            status=AuditStatus(model.status),
            error_message=model.error_message,
            ip_address=model.ip_address,
            details=dict(model.details or {}),
        )
