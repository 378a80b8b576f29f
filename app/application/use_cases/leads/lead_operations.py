"""Lead operations: get, create, update, move, assign, delete (authorized and audited)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from app.application.dtos.audit_log import AuditActor, AuditChanges
from app.application.dtos.lead import LEAD_FIELD_ATTRIBUTES, LeadCreate, LeadResult
from app.application.dtos.team_member import TeamMemberResult
from app.application.interfaces.repositories import (
    ILeadRepository,
    IStageRepository,
    ITeamMemberRepository,
)
from app.application.interfaces.services import (
    IAuditWriter,
    IAuthorizationGate,
    ITransactionRunner,
)
from app.application.services.audit_writer import classify_severity
from app.application.services.diff_service import compute_diff
from app.domain.enums import PermissionAction, ResourceArea
from app.domain.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.enums import AuditAction
from app.shared.utils.datetime import epoch_millis

T = TypeVar("T")

ENTITY_TYPE = "lead"

# API fields that may be omitted from a PATCH but never set to null.
REQUIRED_FIELDS = ("value", "currency", "priority", "temperature", "tags", "customFields")


class LeadService:
    """Lead mutations. Each runs load, authorize, diff, write and audit as one unit."""

    def __init__(
        self,
        lead_repo: ILeadRepository,
        stage_repo: IStageRepository,
        member_repo: ITeamMemberRepository,
        gate: IAuthorizationGate,
        audit_writer: IAuditWriter,
        runner: ITransactionRunner | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.lead_repo = lead_repo
        self.stage_repo = stage_repo
        self.member_repo = member_repo
        self.gate = gate
        self.audit_writer = audit_writer
        self.runner = runner
        self.clock = clock

    async def _current_actor(
        self, actor: TeamMemberResult | None, organization_id: str
    ) -> TeamMemberResult | None:
        """Re-read actor so each attempt authorizes against its stored role and override."""
        if actor is None:
            return None
        current = await self.member_repo.get_by_id_and_organization(
            actor.id, organization_id
        )
        if current is None:
            raise AuthenticationException()
        return current

    async def _atomic(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        operation: Callable[[TeamMemberResult | None], Awaitable[T]],
    ) -> T:
        async def _unit() -> T:
            return await operation(await self._current_actor(actor, organization_id))

        if self.runner is None:
            return await _unit()
        return await self.runner.run(_unit)

    async def _load(self, organization_id: str, lead_id: str) -> LeadResult:
        lead = await self.lead_repo.get_by_id_and_organization(lead_id, organization_id)
        if lead is None:
            raise ResourceNotFoundException("lead", lead_id)
        return lead

    async def _stage_name(self, organization_id: str, stage_id: str | None) -> str | None:
        if stage_id is None:
            return None
        stage = await self.stage_repo.get_by_id_and_organization(stage_id, organization_id)
        return stage.name if stage else None

    async def _require_stage(self, organization_id: str, stage_id: str) -> str:
        name = await self._stage_name(organization_id, stage_id)
        if name is None:
            raise ValidationException("Stage not found in organization", field="stageId")
        return name

    async def _require_assignee(
        self, organization_id: str, member_id: str
    ) -> TeamMemberResult:
        member = await self.member_repo.get_by_id_and_organization(
            member_id, organization_id
        )
        if member is None:
            raise ValidationException(
                "Assignee not found in organization", field="assignedTo"
            )
        return member

    async def get_lead(
        self, actor: TeamMemberResult | None, organization_id: str, lead_id: str
    ) -> LeadResult:
        """Return lead if it belongs to the organization and actor has leads.view."""
        lead = await self._load(organization_id, lead_id)
        self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.VIEW)
        return lead

    async def create_lead(
        self, actor: TeamMemberResult | None, organization_id: str, data: LeadCreate
    ) -> LeadResult:
        """Create a lead in an existing stage; audit with its title."""

        async def _op(actor: TeamMemberResult | None) -> LeadResult:
            self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.CREATE)
            if not data.title or not data.title.strip():
                raise ValidationException("Title is required", field="title")
            await self._require_stage(organization_id, data.stage_id)
            if data.assigned_to is not None:
                await self._require_assignee(organization_id, data.assigned_to)
            lead = await self.lead_repo.create_lead(organization_id, data, self.clock())
            await self.audit_writer.record(
                organization_id=organization_id,
                entity_type=ENTITY_TYPE,
                entity_id=lead.id,
                action=AuditAction.CREATE,
                actor=AuditActor.from_member(actor),
                severity=classify_severity(ENTITY_TYPE, AuditAction.CREATE),
                metadata={"title": lead.title, "contactId": lead.contact_id},
            )
            return lead

        return await self._atomic(actor, organization_id, _op)

    async def update_lead(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        lead_id: str,
        fields: dict[str, Any],
    ) -> LeadResult:
        """Apply a partial update given API field names.

        A change touching only stageId is recorded as a move and one touching
        only assignedTo as an assignment. Changing assignedTo also needs
        leads.assign. Nothing is written or audited when no field differs.
        """
        unknown = sorted(set(fields) - set(LEAD_FIELD_ATTRIBUTES))
        if unknown:
            raise ValidationException(
                f"Unknown lead fields: {', '.join(unknown)}", field=unknown[0]
            )

        async def _op(actor: TeamMemberResult | None) -> LeadResult:
            lead = await self._load(organization_id, lead_id)
            self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.EDIT)
            if "title" in fields and not (fields["title"] or "").strip():
                raise ValidationException("Title is required", field="title")
            for name in REQUIRED_FIELDS:
                if name in fields and fields[name] is None:
                    raise ValidationException(f"{name} cannot be null", field=name)
            changes = compute_diff(lead.audit_snapshot(), fields)
            if changes is None:
                return lead
            changed = set(changes.after)
            metadata: dict[str, Any] = {"title": changes.after.get("title", lead.title)}
            if "assignedTo" in changed:
                self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.ASSIGN)
                assignee_id = changes.after["assignedTo"]
                if assignee_id is not None:
                    assignee = await self._require_assignee(organization_id, assignee_id)
                    metadata["assigneeName"] = assignee.name
            if "stageId" in changed:
                if changes.after["stageId"] is None:
                    raise ValidationException("Stage is required", field="stageId")
                metadata["toStageName"] = await self._require_stage(
                    organization_id, changes.after["stageId"]
                )
                metadata["fromStageName"] = await self._stage_name(
                    organization_id, changes.before["stageId"]
                )
            if changed == {"stageId"}:
                action = AuditAction.MOVE
            elif changed == {"assignedTo"}:
                action = AuditAction.ASSIGN
            else:
                action = AuditAction.UPDATE
            return await self._write(actor, organization_id, lead, changes, action, metadata)

        return await self._atomic(actor, organization_id, _op)

    async def move_lead(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        lead_id: str,
        stage_id: str,
    ) -> LeadResult:
        """Move a lead to another stage; moving to its current stage is a no-op."""

        async def _op(actor: TeamMemberResult | None) -> LeadResult:
            lead = await self._load(organization_id, lead_id)
            self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.EDIT)
            to_stage_name = await self._require_stage(organization_id, stage_id)
            changes = compute_diff(lead.audit_snapshot(), {"stageId": stage_id})
            if changes is None:
                return lead
            metadata = {
                "title": lead.title,
                "fromStageName": await self._stage_name(organization_id, lead.stage_id),
                "toStageName": to_stage_name,
            }
            return await self._write(
                actor, organization_id, lead, changes, AuditAction.MOVE, metadata
            )

        return await self._atomic(actor, organization_id, _op)

    async def assign_lead(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        lead_id: str,
        assigned_to: str | None,
    ) -> LeadResult:
        """Assign (or unassign with None); assigning the current assignee is a no-op."""

        async def _op(actor: TeamMemberResult | None) -> LeadResult:
            lead = await self._load(organization_id, lead_id)
            self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.ASSIGN)
            metadata: dict[str, Any] = {"title": lead.title}
            if assigned_to is not None:
                assignee = await self._require_assignee(organization_id, assigned_to)
                metadata["assigneeName"] = assignee.name
            changes = compute_diff(lead.audit_snapshot(), {"assignedTo": assigned_to})
            if changes is None:
                return lead
            return await self._write(
                actor, organization_id, lead, changes, AuditAction.ASSIGN, metadata
            )

        return await self._atomic(actor, organization_id, _op)

    async def delete_lead(
        self, actor: TeamMemberResult | None, organization_id: str, lead_id: str
    ) -> None:
        """Delete a lead; the audit entry keeps its title as the label."""

        async def _op(actor: TeamMemberResult | None) -> None:
            lead = await self._load(organization_id, lead_id)
            self.gate.authorize(actor, ResourceArea.LEADS, PermissionAction.DELETE)
            await self.lead_repo.delete_lead(lead.id, organization_id, lead.version)
            await self.audit_writer.record(
                organization_id=organization_id,
                entity_type=ENTITY_TYPE,
                entity_id=lead.id,
                action=AuditAction.DELETE,
                actor=AuditActor.from_member(actor),
                severity=classify_severity(ENTITY_TYPE, AuditAction.DELETE),
                metadata={"name": lead.title},
            )

        await self._atomic(actor, organization_id, _op)

    async def _write(
        self,
        actor: TeamMemberResult,
        organization_id: str,
        lead: LeadResult,
        changes: AuditChanges,
        action: AuditAction,
        metadata: dict[str, Any],
    ) -> LeadResult:
        attributes = {LEAD_FIELD_ATTRIBUTES[k]: v for k, v in changes.after.items()}
        updated = await self.lead_repo.update_fields(
            lead.id, organization_id, lead.version, attributes, self.clock()
        )
        await self.audit_writer.record(
            organization_id=organization_id,
            entity_type=ENTITY_TYPE,
            entity_id=lead.id,
            action=action,
            actor=AuditActor.from_member(actor),
            severity=classify_severity(ENTITY_TYPE, action),
            changes=changes,
            metadata=metadata,
        )
        return updated
