"""Audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.audit_log import (
    AuditActorOption,
    AuditCursor,
    AuditFilterOptions,
    AuditLogEntryCreate,
    AuditLogFilters,
    AuditLogResult,
)
from app.infrastructure.persistence.models.audit_log import AuditLog
from app.shared.utils.generators import generate_cuid


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        organization_id=row.organization_id,
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        action=row.action,
        actor_id=row.actor_id,
        actor_type=row.actor_type,
        actor_name=row.actor_name,
        changes=row.changes,
        metadata=row.entry_metadata,
        description=row.description,
        severity=row.severity,
        created_at=row.created_at,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        seq=row.seq,
    )


def _filter_conditions(organization_id: str, filters: AuditLogFilters) -> list:
    """Organization predicate first; every filter narrows with AND."""
    conditions = [AuditLog.organization_id == organization_id]
    if filters.severity is not None:
        conditions.append(AuditLog.severity == filters.severity)
    if filters.entity_type is not None:
        conditions.append(AuditLog.entity_type == filters.entity_type)
    if filters.action is not None:
        conditions.append(AuditLog.action == filters.action)
    if filters.actor_id is not None:
        conditions.append(AuditLog.actor_id == filters.actor_id)
    if filters.start_date is not None:
        conditions.append(AuditLog.created_at >= filters.start_date)
    if filters.end_date is not None:
        conditions.append(AuditLog.created_at <= filters.end_date)
    return conditions


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry in the caller's transaction; return it."""
        row = AuditLog(
            id=generate_cuid(),
            organization_id=entry.organization_id,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            action=entry.action,
            actor_id=entry.actor_id,
            actor_type=entry.actor_type,
            actor_name=entry.actor_name,
            changes=entry.changes,
            entry_metadata=entry.metadata,
            description=entry.description,
            severity=entry.severity,
            created_at=entry.created_at,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
        )
        self.db.add(row)
        await self.db.flush()
        return _orm_to_result(row)

    async def list_page(
        self,
        organization_id: str,
        filters: AuditLogFilters,
        after: AuditCursor | None,
        limit: int,
    ) -> list[AuditLogResult]:
        """Return up to limit entries, newest first, strictly after the cursor.

        Order is (created_at DESC, seq DESC). seq is the insertion sequence,
        so equal timestamps are never skipped or repeated across pages and an
        entry written after the cursor was issued sorts above it.
        """
        conditions = _filter_conditions(organization_id, filters)
        if after is not None:
            conditions.append(
                or_(
                    AuditLog.created_at < after.created_at,
                    and_(
                        AuditLog.created_at == after.created_at,
                        AuditLog.seq < after.seq,
                    ),
                )
            )
        stmt = (
            select(AuditLog)
            .where(and_(*conditions))
            .order_by(AuditLog.created_at.desc(), AuditLog.seq.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def get_filter_options(self, organization_id: str) -> AuditFilterOptions:
        """Distinct values present in the organization's log (index-backed)."""
        scoped = AuditLog.organization_id == organization_id
        entity_types = await self.db.execute(
            select(AuditLog.entity_type)
            .where(scoped)
            .distinct()
            .order_by(AuditLog.entity_type)
        )
        actions = await self.db.execute(
            select(AuditLog.action).where(scoped).distinct().order_by(AuditLog.action)
        )
        # Latest captured name per actor (PostgreSQL DISTINCT ON).
        actors = await self.db.execute(
            select(AuditLog.actor_id, AuditLog.actor_name, AuditLog.actor_type)
            .where(scoped, AuditLog.actor_id.is_not(None))
            .distinct(AuditLog.actor_id)
            .order_by(AuditLog.actor_id, AuditLog.created_at.desc())
        )
        actor_options = sorted(
            (
                AuditActorOption(id=actor_id, name=name, type=actor_type)
                for actor_id, name, actor_type in actors.all()
            ),
            key=lambda a: ((a.name or "").lower(), a.id),
        )
        return AuditFilterOptions(
            entity_types=list(entity_types.scalars().all()),
            actions=list(actions.scalars().all()),
            actors=actor_options,
        )
