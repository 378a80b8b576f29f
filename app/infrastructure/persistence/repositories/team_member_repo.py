"""Team member repository (SQLAlchemy). Implements ITeamMemberRepository."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.team_member import TeamMemberCreate, TeamMemberResult
from app.domain.enums import MemberStatus, MemberType
from app.infrastructure.persistence.models.team_member import TeamMember
from app.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(row: TeamMember) -> TeamMemberResult:
    """Map ORM to application DTO; role stays a raw string."""
    return TeamMemberResult(
        id=row.id,
        organization_id=row.organization_id,
        name=row.name,
        email=row.email,
        role=row.role,
        type=MemberType(row.type),
        status=MemberStatus(row.status),
        permissions_override=row.permissions_override,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class TeamMemberRepository(BaseRepository[TeamMember]):
    """Team member persistence scoped by organization."""

    resource_type = "teamMember"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TeamMember)

    async def get_by_id_and_organization(
        self, member_id: str, organization_id: str
    ) -> TeamMemberResult | None:
        row = await self._get_scoped(member_id, organization_id)
        return _to_result(row) if row else None

    async def create_member(
        self, organization_id: str, data: TeamMemberCreate, now: int
    ) -> TeamMemberResult:
        row = TeamMember(
            organization_id=organization_id,
            name=data.name.strip(),
            email=data.email,
            role=data.role.value,
            type=data.type.value,
            status=MemberStatus.ACTIVE.value,
            permissions_override=None,
            created_at=now,
            updated_at=now,
        )
        return _to_result(await self._add(row))

    async def update_fields(
        self,
        member_id: str,
        organization_id: str,
        expected_version: int,
        fields: dict[str, Any],
        now: int,
    ) -> TeamMemberResult:
        row = await self._update_versioned(
            member_id, organization_id, expected_version, fields, now
        )
        return _to_result(row)
