"""Team member API: invite/provision, status and access changes, effective permissions."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    get_current_member,
    get_organization_id,
    get_team_member_service,
)
from app.application.dtos.team_member import (
    TeamMemberAccessUpdate,
    TeamMemberCreate,
    TeamMemberResult,
)
from app.application.use_cases.team import TeamMemberService
from app.schemas.team_member import (
    EffectivePermissionsResponse,
    TeamMemberAccessRequest,
    TeamMemberCreateRequest,
    TeamMemberResponse,
    TeamMemberStatusRequest,
)

router = APIRouter()

Actor = Annotated[TeamMemberResult, Depends(get_current_member)]
OrganizationId = Annotated[str, Depends(get_organization_id)]
Service = Annotated[TeamMemberService, Depends(get_team_member_service)]


@router.get("/me", response_model=TeamMemberResponse)
async def get_me(actor: Actor):
    """Return the acting member (always allowed)."""
    return TeamMemberResponse.model_validate(actor)


@router.get("/{member_id}", response_model=TeamMemberResponse)
async def get_member(
    member_id: str, actor: Actor, organization_id: OrganizationId, service: Service
):
    """Get a member; reading another member requires team.view."""
    member = await service.get_member(actor, organization_id, member_id)
    return TeamMemberResponse.model_validate(member)


@router.get("/{member_id}/permissions", response_model=EffectivePermissionsResponse)
async def get_member_permissions(
    member_id: str,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Permissions actually enforced for the member (override or role defaults)."""
    member = await service.get_member(actor, organization_id, member_id)
    permissions = service.authorization.effective_permissions(member)
    return EffectivePermissionsResponse(
        member_id=member.id,
        role=member.role,
        customized=member.permissions_override is not None,
        permissions=permissions,
    )


@router.post("", response_model=TeamMemberResponse, status_code=201)
async def create_member(
    body: TeamMemberCreateRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Invite a human or provision an AI member (team.create)."""
    created = await service.create_member(
        actor,
        organization_id,
        TeamMemberCreate(
            name=body.name, role=body.role, type=body.type, email=body.email
        ),
    )
    return TeamMemberResponse.model_validate(created)


@router.patch("/{member_id}/status", response_model=TeamMemberResponse)
async def update_member_status(
    member_id: str,
    body: TeamMemberStatusRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    updated = await service.update_status(actor, organization_id, member_id, body.status)
    return TeamMemberResponse.model_validate(updated)


@router.put("/{member_id}/access", response_model=TeamMemberResponse)
async def update_member_access(
    member_id: str,
    body: TeamMemberAccessRequest,
    actor: Actor,
    organization_id: OrganizationId,
    service: Service,
):
    """Change role and permission override (team.manage)."""
    updated = await service.update_access(
        actor,
        organization_id,
        member_id,
        TeamMemberAccessUpdate(
            role=body.role,
            customize=body.customize,
            permissions_patch=body.permissions,
        ),
    )
    return TeamMemberResponse.model_validate(updated)
