"""Team member operations: read, invite/provision, status and access changes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.application.dtos.audit_log import AuditActor
from app.application.dtos.team_member import (
    TeamMemberAccessUpdate,
    TeamMemberCreate,
    TeamMemberResult,
    member_audit_snapshot,
)
from app.application.interfaces.repositories import ITeamMemberRepository
from app.application.interfaces.services import IAuditWriter, ITransactionRunner
from app.application.services.audit_writer import classify_severity
from app.application.services.authorization_service import AuthorizationService
from app.application.services.diff_service import compute_diff
from app.domain.capabilities import Permissions
from app.domain.enums import MemberStatus, PermissionAction, ResourceArea, Role
from app.domain.exceptions import (
    AuthenticationException,
    IntegrityViolationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.enums import AuditAction
from app.shared.utils.datetime import epoch_millis

T = TypeVar("T")

ENTITY_TYPE = "teamMember"


class TeamMemberService:
    """Team member reads and mutations for one organization."""

    def __init__(
        self,
        member_repo: ITeamMemberRepository,
        authorization: AuthorizationService,
        audit_writer: IAuditWriter,
        runner: ITransactionRunner | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.member_repo = member_repo
        self.authorization = authorization
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

    async def _load(self, organization_id: str, member_id: str) -> TeamMemberResult:
        member = await self.member_repo.get_by_id_and_organization(
            member_id, organization_id
        )
        if member is None:
            raise ResourceNotFoundException("teamMember", member_id)
        return member

    async def get_member(
        self, actor: TeamMemberResult | None, organization_id: str, member_id: str
    ) -> TeamMemberResult:
        """Return a member; self-read needs no capability, others need team.view."""
        if actor is None:
            raise AuthenticationException()
        target = await self._load(organization_id, member_id)
        self.authorization.authorize_member_read(actor, target.id)
        return target

    async def get_effective_permissions(
        self, actor: TeamMemberResult | None, organization_id: str, member_id: str
    ) -> Permissions:
        """Return the permissions actually enforced for a member."""
        target = await self.get_member(actor, organization_id, member_id)
        return self.authorization.effective_permissions(target)

    async def create_member(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        data: TeamMemberCreate,
    ) -> TeamMemberResult:
        """Invite a human or provision an AI member (active, no override).

        Creating an admin also requires team.manage.
        """

        async def _op(actor: TeamMemberResult | None) -> TeamMemberResult:
            self.authorization.authorize(actor, ResourceArea.TEAM, PermissionAction.CREATE)
            role = self.authorization.resolver.coerce_role(data.role)
            if role == Role.ADMIN:
                self.authorization.authorize(
                    actor, ResourceArea.TEAM, PermissionAction.MANAGE
                )
            if not data.name or not data.name.strip():
                raise ValidationException("Name is required", field="name")
            member = await self.member_repo.create_member(
                organization_id, data, self.clock()
            )
            await self.audit_writer.record(
                organization_id=organization_id,
                entity_type=ENTITY_TYPE,
                entity_id=member.id,
                action=AuditAction.CREATE,
                actor=AuditActor.from_member(actor),
                severity=classify_severity(ENTITY_TYPE, AuditAction.CREATE),
                metadata={
                    "name": member.name,
                    "role": member.role,
                    "type": member.type.value,
                },
            )
            return member

        return await self._atomic(actor, organization_id, _op)

    async def update_status(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        member_id: str,
        status: MemberStatus,
    ) -> TeamMemberResult:
        """Change availability status.

        Members may toggle their own active/busy status. Changing someone
        else's needs team.edit; deactivating anyone needs team.delete, and
        members can never deactivate themselves.
        """

        async def _op(actor: TeamMemberResult | None) -> TeamMemberResult:
            target = await self._load(organization_id, member_id)
            if actor is None:
                raise AuthenticationException()
            if status == MemberStatus.INACTIVE:
                self.authorization.authorize(
                    actor, ResourceArea.TEAM, PermissionAction.DELETE
                )
                self.authorization.ensure_no_self_lockout(
                    actor, target.id, new_status=status
                )
            elif actor.id != target.id or not actor.is_active:
                self.authorization.authorize(actor, ResourceArea.TEAM, PermissionAction.EDIT)
            changes = compute_diff({"status": target.status.value}, {"status": status.value})
            if changes is None:
                return target
            updated = await self.member_repo.update_fields(
                target.id,
                organization_id,
                target.version,
                {"status": status.value},
                self.clock(),
            )
            await self.audit_writer.record(
                organization_id=organization_id,
                entity_type=ENTITY_TYPE,
                entity_id=target.id,
                action=AuditAction.UPDATE,
                actor=AuditActor.from_member(actor),
                severity=classify_severity(
                    ENTITY_TYPE,
                    AuditAction.UPDATE,
                    access_change=status == MemberStatus.INACTIVE,
                ),
                changes=changes,
                metadata={"name": target.name, "status": status.value},
            )
            return updated

        return await self._atomic(actor, organization_id, _op)

    async def update_access(
        self,
        actor: TeamMemberResult | None,
        organization_id: str,
        member_id: str,
        update: TeamMemberAccessUpdate,
    ) -> TeamMemberResult:
        """Change a member's role and permission override (team.manage).

        With customize, the partial patch is expanded over the new role's
        defaults into a complete override before it is stored; without it the
        override is cleared, so a patch sent without customize is rejected.
        An actor can never remove their own team.manage.
        """
        if not update.customize and update.permissions_patch is not None:
            raise ValidationException(
                "Permissions require customize to be enabled", field="permissions"
            )

        async def _op(actor: TeamMemberResult | None) -> TeamMemberResult:
            target = await self._load(organization_id, member_id)
            self.authorization.authorize(actor, ResourceArea.TEAM, PermissionAction.MANAGE)
            role = self.authorization.resolver.coerce_role(update.role)
            new_override: Permissions | None = None
            if update.customize:
                try:
                    new_override = self.authorization.resolver.with_override(
                        role, update.permissions_patch
                    )
                except IntegrityViolationException as exc:
                    raise ValidationException(exc.message, field="permissions") from exc
            self.authorization.ensure_no_self_lockout(
                actor,
                target.id,
                new_role=role,
                new_override=new_override,
                clears_override=not update.customize,
            )
            changes = compute_diff(
                member_audit_snapshot(target),
                {"role": role.value, "permissionsOverride": new_override},
            )
            if changes is None:
                return target
            fields = {}
            if "role" in changes.after:
                fields["role"] = role.value
            if "permissionsOverride" in changes.after:
                fields["permissions_override"] = new_override
            updated = await self.member_repo.update_fields(
                target.id, organization_id, target.version, fields, self.clock()
            )
            await self.audit_writer.record(
                organization_id=organization_id,
                entity_type=ENTITY_TYPE,
                entity_id=target.id,
                action=AuditAction.UPDATE,
                actor=AuditActor.from_member(actor),
                severity=classify_severity(
                    ENTITY_TYPE, AuditAction.UPDATE, access_change=True
                ),
                changes=changes,
                metadata={"name": target.name, "role": role.value},
            )
            return updated

        return await self._atomic(actor, organization_id, _op)
