"""Team member use cases."""

from app.application.use_cases.team.team_member_operations import TeamMemberService

__all__ = ["TeamMemberService"]
