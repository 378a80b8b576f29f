"""Pydantic request/response schemas for the API."""

from app.schemas.audit_log import (
    AuditFilterOptionsResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.lead import (
    LeadAssignRequest,
    LeadCreateRequest,
    LeadMoveRequest,
    LeadResponse,
    LeadUpdateRequest,
)
from app.schemas.team_member import (
    EffectivePermissionsResponse,
    TeamMemberAccessRequest,
    TeamMemberCreateRequest,
    TeamMemberResponse,
    TeamMemberStatusRequest,
)

__all__ = [
    "AuditFilterOptionsResponse",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "EffectivePermissionsResponse",
    "HealthResponse",
    "LeadAssignRequest",
    "LeadCreateRequest",
    "LeadMoveRequest",
    "LeadResponse",
    "LeadUpdateRequest",
    "TeamMemberAccessRequest",
    "TeamMemberCreateRequest",
    "TeamMemberResponse",
    "TeamMemberStatusRequest",
]
