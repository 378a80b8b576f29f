"""DTOs for the audit trail (write input, read-model, query filters and pages)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.shared.enums import ActorType

if TYPE_CHECKING:
    from app.application.dtos.team_member import TeamMemberResult

SYSTEM_ACTOR_NAME = "Sistema"


@dataclass(frozen=True)
class AuditChanges:
    """Minimal before/after change-set produced by the diff engine."""

    before: dict[str, Any]
    after: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"before": dict(self.before), "after": dict(self.after)}


@dataclass(frozen=True)
class AuditActor:
    """Who performed an audited action, with the name captured at write time."""

    id: str | None
    type: ActorType
    name: str

    @classmethod
    def from_member(cls, member: TeamMemberResult) -> AuditActor:
        actor_type = ActorType.AI if member.type.value == "ai" else ActorType.HUMAN
        return cls(id=member.id, type=actor_type, name=member.name)

    @classmethod
    def system(cls, name: str = SYSTEM_ACTOR_NAME) -> AuditActor:
        return cls(id=None, type=ActorType.SYSTEM, name=name)


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update."""

    organization_id: str
    entity_type: str
    entity_id: str
    action: str
    actor_id: str | None
    actor_type: str
    actor_name: str | None
    changes: dict[str, Any] | None
    metadata: dict[str, Any] | None
    description: str
    severity: str
    created_at: int
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit log entry (read-model for list/export).

    description is None only on legacy rows written before canonical
    descriptions were stored.
    seq is the database insertion sequence that breaks created_at ties.
    """

    id: str
    organization_id: str
    entity_type: str
    entity_id: str
    action: str
    actor_id: str | None
    actor_type: str
    actor_name: str | None
    changes: dict[str, Any] | None
    metadata: dict[str, Any] | None
    description: str | None
    severity: str
    created_at: int
    ip_address: str | None = None
    user_agent: str | None = None
    seq: int = 0


@dataclass(frozen=True)
class AuditLogFilters:
    """Optional AND-combined narrowing predicates; dates are inclusive epoch millis."""

    severity: str | None = None
    entity_type: str | None = None
    action: str | None = None
    actor_id: str | None = None
    start_date: int | None = None
    end_date: int | None = None


@dataclass(frozen=True)
class AuditCursor:
    """Sort key of the last returned entry: (created_at DESC, seq DESC)."""

    created_at: int
    seq: int


@dataclass(frozen=True)
class AuditLogPage:
    """One page of audit log entries, newest first."""

    logs: list[AuditLogResult]
    has_more: bool
    next_cursor: str | None = None


@dataclass(frozen=True)
class AuditActorOption:
    """Actor seen in a tenant's audit log (for filter pickers)."""

    id: str
    name: str | None
    type: str


@dataclass(frozen=True)
class AuditFilterOptions:
    """Distinct filter values present in one tenant's audit log."""

    entity_types: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)
    actors: list[AuditActorOption] = field(default_factory=list)
