"""Lead repository (SQLAlchemy). Implements ILeadRepository."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.lead import LeadCreate, LeadResult
from app.infrastructure.persistence.models.lead import Lead
from app.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(row: Lead) -> LeadResult:
    """Map ORM to application DTO."""
    return LeadResult(
        id=row.id,
        organization_id=row.organization_id,
        title=row.title,
        contact_id=row.contact_id,
        stage_id=row.stage_id,
        assigned_to=row.assigned_to,
        value=row.value,
        currency=row.currency,
        priority=row.priority,
        temperature=row.temperature,
        tags=list(row.tags or []),
        custom_fields=dict(row.custom_fields or {}),
        source_id=row.source_id,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class LeadRepository(BaseRepository[Lead]):
    """Lead persistence scoped by organization, optimistic-locked on version."""

    resource_type = "lead"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Lead)

    async def get_by_id_and_organization(
        self, lead_id: str, organization_id: str
    ) -> LeadResult | None:
        row = await self._get_scoped(lead_id, organization_id)
        return _to_result(row) if row else None

    async def create_lead(
        self, organization_id: str, data: LeadCreate, now: int
    ) -> LeadResult:
        row = Lead(
            organization_id=organization_id,
            title=data.title.strip(),
            contact_id=data.contact_id,
            stage_id=data.stage_id,
            assigned_to=data.assigned_to,
            value=data.value,
            currency=data.currency,
            priority=data.priority,
            temperature=data.temperature,
            tags=list(data.tags),
            custom_fields=dict(data.custom_fields),
            source_id=data.source_id,
            created_at=now,
            updated_at=now,
        )
        return _to_result(await self._add(row))

    async def update_fields(
        self,
        lead_id: str,
        organization_id: str,
        expected_version: int,
        fields: dict[str, Any],
        now: int,
    ) -> LeadResult:
        row = await self._update_versioned(
            lead_id, organization_id, expected_version, fields, now
        )
        return _to_result(row)

    async def delete_lead(
        self, lead_id: str, organization_id: str, expected_version: int
    ) -> None:
        await self._delete_versioned(lead_id, organization_id, expected_version)
