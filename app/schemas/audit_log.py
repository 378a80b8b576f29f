"""Request/response schemas for audit log API."""

from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel


class AuditLogEntryResponse(CamelModel):
    """Single audit log entry (read). description is always filled."""

    id: str
    organization_id: str
    entity_type: str
    entity_id: str
    action: str
    actor_id: str | None
    actor_type: str
    actor_name: str | None
    changes: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    description: str
    severity: str
    created_at: int = Field(..., description="Epoch milliseconds")
    ip_address: str | None = None
    user_agent: str | None = None


class AuditLogListResponse(CamelModel):
    """One page of audit log entries, newest first."""

    logs: list[AuditLogEntryResponse]
    has_more: bool
    next_cursor: str | None = Field(
        None, description="Opaque token; pass as cursor to fetch the next page"
    )


class AuditActorOptionResponse(CamelModel):
    id: str
    name: str | None
    type: str


class AuditFilterOptionsResponse(CamelModel):
    """Distinct filter values present in the organization's audit log."""

    entity_types: list[str]
    actions: list[str]
    actors: list[AuditActorOptionResponse]
