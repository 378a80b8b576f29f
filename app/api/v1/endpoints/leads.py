"""Lead API: thin routes delegating to LeadService (authorized and audited)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    get_current_member,
    get_lead_service,
    get_organization_id,
)
from app.application.dtos.lead import LeadCreate
from app.application.dtos.team_member import TeamMemberResult
from app.application.use_cases.leads import LeadService
from app.schemas.lead import (
    LeadAssignRequest,
    LeadCreateRequest,
    LeadMoveRequest,
    LeadResponse,
    LeadUpdateRequest,
)

router = APIRouter()

Actor = Annotated[TeamMemberResult, Depends(get_current_member)]
OrganizationId = Annotated[str, Depends(get_organization_id)]
Service = Annotated[LeadService, Depends(get_lead_service)]


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: str, actor: Actor, organization_id: OrganizationId, service: Service
):
    """Get a lead by id (leads.view)."""
    lead = await service.get_lead(actor, organization_id, lead_id)
    return LeadResponse.model_validate(lead)


@router.post("", response_model=LeadResponse, status_code=201)
async def create_lead(
    body: LeadCreateRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Create a lead in an existing stage (leads.create)."""
    created = await service.create_lead(
        actor, organization_id, LeadCreate(**body.model_dump())
    )
    return LeadResponse.model_validate(created)


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: str,
    body: LeadUpdateRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Partially update a lead (leads.edit; leads.assign when assignedTo changes)."""
    updated = await service.update_lead(
        actor, organization_id, lead_id, body.changed_fields()
    )
    return LeadResponse.model_validate(updated)


@router.post("/{lead_id}/move", response_model=LeadResponse)
async def move_lead(
    lead_id: str,
    body: LeadMoveRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Move a lead to another pipeline stage."""
    moved = await service.move_lead(actor, organization_id, lead_id, body.stage_id)
    return LeadResponse.model_validate(moved)


@router.post("/{lead_id}/assign", response_model=LeadResponse)
async def assign_lead(
    lead_id: str,
    body: LeadAssignRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Assign a lead to a team member, or unassign with assignedTo null."""
    assigned = await service.assign_lead(
        actor, organization_id, lead_id, body.assigned_to
    )
    return LeadResponse.model_validate(assigned)


@router.delete("/{lead_id}", status_code=204)
async def delete_lead(
    lead_id: str, actor: Actor, organization_id: OrganizationId, service: Service
):
    await service.delete_lead(actor, organization_id, lead_id)
