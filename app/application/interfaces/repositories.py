"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Every method takes the organization id: there is no tenant-less read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.audit_log import (
        AuditCursor,
        AuditFilterOptions,
        AuditLogEntryCreate,
        AuditLogFilters,
        AuditLogResult,
    )
    from app.application.dtos.lead import LeadCreate, LeadResult, StageResult
    from app.application.dtos.team_member import TeamMemberCreate, TeamMemberResult


class ITeamMemberRepository(Protocol):
    """Protocol for team member repository (DIP)."""

    async def get_by_id_and_organization(
        self, member_id: str, organization_id: str
    ) -> TeamMemberResult | None:
        """Return member by ID if it belongs to the organization."""

    async def create_member(
        self, organization_id: str, data: TeamMemberCreate, now: int
    ) -> TeamMemberResult:
        """Create an active member with no permissions override."""

    async def update_fields(
        self,
        member_id: str,
        organization_id: str,
        expected_version: int,
        fields: dict[str, Any],
        now: int,
    ) -> TeamMemberResult:
        """Apply fields (ORM attribute names) if the row is still at expected_version.

        Raises ConcurrentWriteConflictException when another write won.
        """


class ILeadRepository(Protocol):
    """Protocol for lead repository (DIP)."""

    async def get_by_id_and_organization(
        self, lead_id: str, organization_id: str
    ) -> LeadResult | None:
        """Return lead by ID if it belongs to the organization."""

    async def create_lead(
        self, organization_id: str, data: LeadCreate, now: int
    ) -> LeadResult:
        """Create a lead."""

    async def update_fields(
        self,
        lead_id: str,
        organization_id: str,
        expected_version: int,
        fields: dict[str, Any],
        now: int,
    ) -> LeadResult:
        """Apply fields (ORM attribute names) if the row is still at expected_version.

        Raises ConcurrentWriteConflictException when another write won.
        """

    async def delete_lead(
        self, lead_id: str, organization_id: str, expected_version: int
    ) -> None:
        """Delete the lead if still at expected_version."""


class IStageRepository(Protocol):
    """Protocol for pipeline stage repository (DIP)."""

    async def get_by_id_and_organization(
        self, stage_id: str, organization_id: str
    ) -> StageResult | None:
        """Return stage by ID if it belongs to the organization."""


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log repository (DIP). No update/delete."""

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one entry in the caller's transaction; return it."""

    async def list_page(
        self,
        organization_id: str,
        filters: AuditLogFilters,
        after: AuditCursor | None,
        limit: int,
    ) -> list[AuditLogResult]:
        """Return up to limit entries ordered (created_at DESC, seq DESC), strictly after cursor."""

    async def get_filter_options(self, organization_id: str) -> AuditFilterOptions:
        """Return distinct entity types, actions and actors present for the organization."""
