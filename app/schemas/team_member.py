"""Request/response schemas for team member API."""

from pydantic import EmailStr, Field

from app.domain.enums import MemberStatus, MemberType, Role
from app.schemas.common import CamelModel


class TeamMemberCreateRequest(CamelModel):
    """Body for POST /team-members (invite a human or provision an AI agent)."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr | None = None
    role: Role
    type: MemberType = MemberType.HUMAN


class TeamMemberStatusRequest(CamelModel):
    status: MemberStatus


class TeamMemberAccessRequest(CamelModel):
    """Body for PUT /team-members/{id}/access.

    permissions is a partial patch over the role defaults, e.g.
    {"leads": {"delete": true}}; sending it without customize is a 400.
    """

    role: Role
    customize: bool = False
    permissions: dict[str, dict[str, bool]] | None = None


class TeamMemberResponse(CamelModel):
    """Team member (read)."""

    id: str
    organization_id: str
    name: str
    email: str | None
    role: str
    type: MemberType
    status: MemberStatus
    permissions_override: dict[str, dict[str, bool]] | None
    version: int
    created_at: int
    updated_at: int


class EffectivePermissionsResponse(CamelModel):
    """Permissions actually enforced for a member."""

    member_id: str
    role: str
    customized: bool
    permissions: dict[str, dict[str, bool]]
