"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.lead_repo import LeadRepository
from app.infrastructure.persistence.repositories.stage_repo import StageRepository
from app.infrastructure.persistence.repositories.team_member_repo import (
    TeamMemberRepository,
)

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "LeadRepository",
    "StageRepository",
    "TeamMemberRepository",
]
