"""Application DTOs (no ORM dependency)."""

from app.application.dtos.audit_log import (
    AuditActor,
    AuditActorOption,
    AuditChanges,
    AuditCursor,
    AuditFilterOptions,
    AuditLogEntryCreate,
    AuditLogFilters,
    AuditLogPage,
    AuditLogResult,
)
from app.application.dtos.lead import LeadCreate, LeadResult, StageResult
from app.application.dtos.team_member import (
    TeamMemberAccessUpdate,
    TeamMemberCreate,
    TeamMemberResult,
)

__all__ = [
    "AuditActor",
    "AuditActorOption",
    "AuditChanges",
    "AuditCursor",
    "AuditFilterOptions",
    "AuditLogEntryCreate",
    "AuditLogFilters",
    "AuditLogPage",
    "AuditLogResult",
    "LeadCreate",
    "LeadResult",
    "StageResult",
    "TeamMemberAccessUpdate",
    "TeamMemberCreate",
    "TeamMemberResult",
]
