"""Service interfaces (ports) for the application layer.

Protocols for services used by use cases (DIP). Implementations live in
app.application.services; use cases depend on these contracts only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditActor, AuditChanges
    from app.application.dtos.team_member import TeamMemberResult
    from app.domain.enums import PermissionAction, ResourceArea, Severity
    from app.shared.enums import AuditAction

T = TypeVar("T")


class IAuthorizationGate(Protocol):
    """Protocol for the capability check run before every mutation."""

    def authorize(
        self,
        member: TeamMemberResult | None,
        area: ResourceArea | str,
        action: PermissionAction | str,
    ) -> None:
        """Raise AuthenticationException / AuthorizationException on denial."""


class IAuditWriter(Protocol):
    """Protocol for appending one audit entry in the current transaction."""

    async def record(
        self,
        *,
        organization_id: str,
        entity_type: str,
        entity_id: str,
        action: AuditAction | str,
        actor: AuditActor,
        severity: Severity | str,
        changes: AuditChanges | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Persist the entry and return its id."""


class ITransactionRunner(Protocol):
    """Protocol for running one authorize-diff-write unit with conflict retries."""

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation atomically; re-run it on ConcurrentWriteConflictException."""
