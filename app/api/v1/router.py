"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import audit_log, health, leads, team_members

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(
    team_members.router, prefix="/team-members", tags=["team-members"]
)
api_router.include_router(audit_log.router, prefix="/audit-logs", tags=["audit-logs"])
