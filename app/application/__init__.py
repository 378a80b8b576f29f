"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, transaction runner).
"""

from app.application.interfaces import (
    IAuditLogRepository,
    IAuditWriter,
    IAuthorizationGate,
    ILeadRepository,
    IStageRepository,
    ITeamMemberRepository,
    ITransactionRunner,
)
from app.application.services.audit_query_service import AuditQueryService
from app.application.services.audit_writer import AuditWriter
from app.application.services.authorization_service import AuthorizationService
from app.application.use_cases.leads import LeadService
from app.application.use_cases.team import TeamMemberService

__all__ = [
    "AuditQueryService",
    "AuditWriter",
    "AuthorizationService",
    "IAuditLogRepository",
    "IAuditWriter",
    "IAuthorizationGate",
    "ILeadRepository",
    "IStageRepository",
    "ITeamMemberRepository",
    "ITransactionRunner",
    "LeadService",
    "TeamMemberService",
]
