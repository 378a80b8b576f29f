"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.audit_log import AuditLog
from app.infrastructure.persistence.models.lead import Lead
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    EpochTimestampMixin,
    JsonType,
    OrganizationMixin,
    OrganizationScopedModel,
)
from app.infrastructure.persistence.models.organization import Organization
from app.infrastructure.persistence.models.stage import Stage
from app.infrastructure.persistence.models.team_member import TeamMember

__all__ = [
    "AuditLog",
    "CuidMixin",
    "EpochTimestampMixin",
    "JsonType",
    "Lead",
    "Organization",
    "OrganizationMixin",
    "OrganizationScopedModel",
    "Stage",
    "TeamMember",
]
