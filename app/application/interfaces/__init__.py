"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAuditLogRepository,
    ILeadRepository,
    IStageRepository,
    ITeamMemberRepository,
)
from app.application.interfaces.services import (
    IAuditWriter,
    IAuthorizationGate,
    ITransactionRunner,
)

__all__ = [
    "IAuditLogRepository",
    "IAuditWriter",
    "IAuthorizationGate",
    "ILeadRepository",
    "IStageRepository",
    "ITeamMemberRepository",
    "ITransactionRunner",
]
