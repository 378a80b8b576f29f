"""Authorization gate: capability checks invoked before every mutation."""

from __future__ import annotations

from app.application.dtos.team_member import TeamMemberResult
from app.application.services.permission_resolver import PermissionResolver
from app.domain.capabilities import Permissions, is_granted
from app.domain.enums import MemberStatus, PermissionAction, ResourceArea, Role
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    SelfLockoutException,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_TEAM = ResourceArea.TEAM.value
_MANAGE = PermissionAction.MANAGE.value


class AuthorizationService:
    """Centralized capability checking against resolved effective permissions.

    AI members go through the same checks as humans; only their default
    table differs. Denials never auto-elevate and never no-op.
    """

    def __init__(self, resolver: PermissionResolver | None = None) -> None:
        self.resolver = resolver or PermissionResolver()

    def effective_permissions(self, member: TeamMemberResult) -> Permissions:
        """Return the member's effective permissions (override or role defaults)."""
        return self.resolver.resolve(member.role, member.permissions_override)

    def check(
        self,
        member: TeamMemberResult,
        area: ResourceArea | str,
        action: PermissionAction | str,
    ) -> bool:
        """Return True if member is active and holds area.action."""
        if member.status == MemberStatus.INACTIVE:
            return False
        return is_granted(
            self.effective_permissions(member), _value(area), _value(action)
        )

    def authorize(
        self,
        member: TeamMemberResult | None,
        area: ResourceArea | str,
        action: PermissionAction | str,
    ) -> None:
        """Raise unless member may perform area.action.

        Raises:
            AuthenticationException: No identified member.
            AuthorizationException: Member lacks the capability (or is inactive).
            IntegrityViolationException: Member's role or stored override is corrupt.
        """
        if member is None:
            raise AuthenticationException()
        if not self.check(member, area, action):
            logger.warning(
                "Authorization denied: member=%s org=%s capability=%s.%s",
                member.id,
                member.organization_id,
                _value(area),
                _value(action),
            )
            raise AuthorizationException(area=_value(area), action=_value(action))

    def authorize_member_read(
        self, actor: TeamMemberResult | None, target_member_id: str
    ) -> None:
        """Self-read is always allowed; reading another member needs team.view."""
        if actor is None:
            raise AuthenticationException()
        if actor.id == target_member_id and actor.status != MemberStatus.INACTIVE:
            return
        self.authorize(actor, ResourceArea.TEAM, PermissionAction.VIEW)

    def ensure_no_self_lockout(
        self,
        actor: TeamMemberResult,
        target_member_id: str,
        *,
        new_role: Role | str | None = None,
        new_override: Permissions | None = None,
        clears_override: bool = False,
        new_status: MemberStatus | None = None,
    ) -> None:
        """Reject a change that would remove the actor's own team.manage capability.

        Only applies when the actor is changing their own record. The proposed
        role/override/status is resolved exactly as it would be after the write.
        """
        if actor.id != target_member_id:
            return
        if new_status == MemberStatus.INACTIVE:
            raise SelfLockoutException(actor.id)
        role = new_role if new_role is not None else actor.role
        if clears_override:
            override = None
        elif new_override is not None:
            override = new_override
        else:
            override = actor.permissions_override
        if not is_granted(self.resolver.resolve(role, override), _TEAM, _MANAGE):
            raise SelfLockoutException(actor.id)


def _value(item: ResourceArea | PermissionAction | str) -> str:
    return item.value if isinstance(item, (ResourceArea, PermissionAction)) else item
