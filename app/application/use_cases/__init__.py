"""Application use cases: one entry point per workflow."""

from app.application.use_cases.leads import LeadService
from app.application.use_cases.team import TeamMemberService

__all__ = [
    "LeadService",
    "TeamMemberService",
]
