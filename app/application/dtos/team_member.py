"""DTOs for team member use cases (no dependency on ORM)."""

from dataclasses import dataclass
from typing import Any

from app.domain.enums import MemberStatus, MemberType, Role


@dataclass(frozen=True)
class TeamMemberResult:
    """Team member read-model: the acting identity and the target of team operations.

    role is kept as the stored string so a corrupt value reaches the resolver
    (and fails there) instead of failing while loading.
    """

    id: str
    organization_id: str
    name: str
    email: str | None
    role: str
    type: MemberType
    status: MemberStatus
    permissions_override: dict[str, dict[str, bool]] | None
    version: int = 1
    created_at: int = 0
    updated_at: int = 0

    @property
    def is_active(self) -> bool:
        return self.status != MemberStatus.INACTIVE


@dataclass(frozen=True)
class TeamMemberCreate:
    """Input for inviting a human or provisioning an AI agent."""

    name: str
    role: Role
    type: MemberType
    email: str | None = None


@dataclass(frozen=True)
class TeamMemberAccessUpdate:
    """Role and permission change for one member.

    permissions_patch is a partial override applied on top of the role defaults;
    customize=False clears any override so the member inherits role defaults.
    """

    role: Role
    customize: bool = False
    permissions_patch: dict[str, dict[str, bool]] | None = None


def member_audit_snapshot(member: TeamMemberResult) -> dict[str, Any]:
    """Fields of a member compared by the diff engine on access changes."""
    return {
        "role": member.role,
        "permissionsOverride": member.permissions_override,
    }
