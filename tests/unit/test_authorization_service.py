"""AuthorizationService: capability checks, member reads, self-lockout guard."""

import pytest

from app.application.services.authorization_service import AuthorizationService
from app.application.services.permission_resolver import PermissionResolver
from app.domain.capabilities import AREA_ACTIONS, CapabilityMatrix, build_permissions
from app.domain.enums import MemberStatus, MemberType, PermissionAction, ResourceArea, Role
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    IntegrityViolationException,
    SelfLockoutException,
)


def test_authorize_without_member_raises_authentication(authorization) -> None:
    with pytest.raises(AuthenticationException):
        authorization.authorize(None, ResourceArea.LEADS, PermissionAction.VIEW)


def test_agent_cannot_delete_leads(authorization, member_factory) -> None:
    agent = member_factory("bruno", Role.AGENT)
    with pytest.raises(AuthorizationException) as exc_info:
        authorization.authorize(agent, ResourceArea.LEADS, PermissionAction.DELETE)
    assert exc_info.value.to_dict() == {
        "error": "PERMISSION_DENIED",
        "message": "Not authorized",
    }


def test_accepts_plain_string_capabilities(authorization, member_factory) -> None:
    manager = member_factory("marcos", Role.MANAGER)
    authorization.authorize(manager, "leads", "delete")
    assert authorization.check(manager, "team", "manage") is False


def test_inactive_member_is_denied_everything(authorization, member_factory) -> None:
    admin = member_factory("ana", Role.ADMIN, status=MemberStatus.INACTIVE)
    with pytest.raises(AuthorizationException):
        authorization.authorize(admin, ResourceArea.LEADS, PermissionAction.VIEW)


def test_busy_member_keeps_capabilities(authorization, member_factory) -> None:
    agent = member_factory("bruno", Role.AGENT, status=MemberStatus.BUSY)
    authorization.authorize(agent, ResourceArea.LEADS, PermissionAction.EDIT)


def test_ai_member_is_denied_like_a_human(authorization, member_factory) -> None:
    """AI members get the same denial; there is no silent skip."""
    iris = member_factory("iris", Role.AI, member_type=MemberType.AI)
    with pytest.raises(AuthorizationException):
        authorization.authorize(iris, ResourceArea.LEADS, PermissionAction.DELETE)


def test_override_grants_beyond_role(authorization, member_factory) -> None:
    override = authorization.resolver.with_override(Role.AI, {"leads": {"delete": True}})
    iris = member_factory(
        "iris", Role.AI, member_type=MemberType.AI, permissions_override=override
    )
    authorization.authorize(iris, ResourceArea.LEADS, PermissionAction.DELETE)


def test_override_revokes_admin_capability(authorization, member_factory) -> None:
    override = build_permissions({"leads": ("view",)})
    admin = member_factory("ana", Role.ADMIN, permissions_override=override)
    with pytest.raises(AuthorizationException):
        authorization.authorize(admin, ResourceArea.LEADS, PermissionAction.DELETE)


def test_corrupt_role_raises_integrity_violation(authorization, member_factory) -> None:
    member = member_factory("ghost", "owner")
    with pytest.raises(IntegrityViolationException):
        authorization.authorize(member, ResourceArea.LEADS, PermissionAction.VIEW)


def test_member_may_always_read_self(authorization, member_factory) -> None:
    override = build_permissions({})
    member = member_factory("bruno", Role.AGENT, permissions_override=override)
    authorization.authorize_member_read(member, "bruno")
    with pytest.raises(AuthorizationException):
        authorization.authorize_member_read(member, "ana")


def test_effective_permissions_reflect_override(authorization, member_factory) -> None:
    override = authorization.resolver.with_override(Role.AGENT, {"leads": {"assign": True}})
    member = member_factory("bruno", Role.AGENT, permissions_override=override)
    assert authorization.effective_permissions(member)["leads"]["assign"] is True


class TestSelfLockout:
    def test_admin_cannot_demote_self(self, authorization, member_factory) -> None:
        admin = member_factory("ana", Role.ADMIN)
        with pytest.raises(SelfLockoutException):
            authorization.ensure_no_self_lockout(admin, "ana", new_role=Role.MANAGER)

    def test_admin_cannot_override_away_team_manage(
        self, authorization, member_factory
    ) -> None:
        admin = member_factory("ana", Role.ADMIN)
        override = authorization.resolver.with_override(
            Role.ADMIN, {"team": {"manage": False}}
        )
        with pytest.raises(SelfLockoutException):
            authorization.ensure_no_self_lockout(admin, "ana", new_override=override)

    def test_admin_cannot_deactivate_self(self, authorization, member_factory) -> None:
        admin = member_factory("ana", Role.ADMIN)
        with pytest.raises(SelfLockoutException):
            authorization.ensure_no_self_lockout(
                admin, "ana", new_status=MemberStatus.INACTIVE
            )

    def test_clearing_override_falls_back_to_role(
        self, authorization, member_factory
    ) -> None:
        """A manager holding team.manage only via override loses it when cleared."""
        override = authorization.resolver.with_override(
            Role.MANAGER, {"team": {"manage": True}}
        )
        manager = member_factory("marcos", Role.MANAGER, permissions_override=override)
        with pytest.raises(SelfLockoutException):
            authorization.ensure_no_self_lockout(manager, "marcos", clears_override=True)

    def test_changes_to_others_are_not_checked(self, authorization, member_factory) -> None:
        admin = member_factory("ana", Role.ADMIN)
        authorization.ensure_no_self_lockout(admin, "otto", new_role=Role.AGENT)

    def test_keeping_team_manage_is_allowed(self, authorization, member_factory) -> None:
        admin = member_factory("ana", Role.ADMIN)
        override = authorization.resolver.with_override(
            Role.ADMIN, {"leads": {"delete": False}}
        )
        authorization.ensure_no_self_lockout(admin, "ana", new_override=override)


def test_injected_matrix_gate_denies_by_default(member_factory) -> None:
    granted = {"leads": ("view", "edit"), "team": ("view",)}
    matrix = CapabilityMatrix(defaults={role: build_permissions(granted) for role in Role})
    service = AuthorizationService(PermissionResolver(matrix))
    member = member_factory("ana", Role.ADMIN)

    for area, actions in AREA_ACTIONS.items():
        for action in actions:
            if action in granted.get(area, ()):
                service.authorize(member, area, action)
            else:
                with pytest.raises(AuthorizationException):
                    service.authorize(member, area, action)


def test_undeclared_capability_is_denied(authorization, member_factory) -> None:
    admin = member_factory("ana", Role.ADMIN)
    assert authorization.check(admin, "auditLogs", "export") is False
    assert authorization.check(admin, "billing", "view") is False


def test_corrupt_stored_override_raises_integrity_violation(
    authorization, member_factory
) -> None:
    partial = {"leads": {"view": True, "delete": True}}
    member = member_factory("bruno", Role.AGENT, permissions_override=partial)
    with pytest.raises(IntegrityViolationException):
        authorization.authorize(member, ResourceArea.LEADS, PermissionAction.VIEW)
