"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the acting team member and
application services. All services are built from infrastructure
implementations here; routes depend only on these dependencies, not on
infra directly.

Reads use get_db; mutations use get_db_transactional so the entity write
and its audit entry commit or roll back together.
"""

from __future__ import annotations

import re
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.team_member import TeamMemberResult
from app.application.services.audit_query_service import AuditQueryService
from app.application.services.audit_writer import AuditWriter
from app.application.services.authorization_service import AuthorizationService
from app.application.use_cases.leads import LeadService
from app.application.use_cases.team import TeamMemberService
from app.core.config import get_settings
from app.domain.enums import PermissionAction, ResourceArea
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    AuditLogRepository,
    LeadRepository,
    StageRepository,
    TeamMemberRepository,
)
from app.infrastructure.persistence.transaction import TransactionRunner
from app.infrastructure.security.jwt import verify_token

_ORGANIZATION_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")

_http_bearer = HTTPBearer(auto_error=False)


def get_organization_id(request: Request) -> str:
    """Resolve the organization id from the tenant header (400 if missing or malformed)."""
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not _ORGANIZATION_ID_RE.fullmatch(value):
        raise HTTPException(status_code=400, detail="Invalid organization id")
    return value


# ---- Repositories ----


def get_team_member_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamMemberRepository:
    """Team member repository for reads (identity lookup, member reads)."""
    return TeamMemberRepository(db)


def get_audit_log_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuditLogRepository:
    """Audit log repository for reads."""
    return AuditLogRepository(db)


def get_transaction_runner(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TransactionRunner:
    """Retries a mutation on write conflicts, inside the request transaction."""
    return TransactionRunner(db, max_retries=get_settings().write_conflict_max_retries)


# ---- Services ----


def get_authorization_service() -> AuthorizationService:
    """Capability checks against role defaults and member overrides."""
    return AuthorizationService()


def get_audit_writer(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AuditWriter:
    """Audit writer bound to the write transaction."""
    return AuditWriter(AuditLogRepository(db))


def get_audit_query_service(
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
) -> AuditQueryService:
    settings = get_settings()
    return AuditQueryService(
        audit_repo,
        default_limit=settings.audit_page_size_default,
        max_limit=settings.audit_page_size_max,
    )


def get_lead_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
    audit_writer: Annotated[AuditWriter, Depends(get_audit_writer)],
    runner: Annotated[TransactionRunner, Depends(get_transaction_runner)],
) -> LeadService:
    """Lead service; every repository shares the write transaction."""
    return LeadService(
        lead_repo=LeadRepository(db),
        stage_repo=StageRepository(db),
        member_repo=TeamMemberRepository(db),
        gate=authorization,
        audit_writer=audit_writer,
        runner=runner,
    )


def get_team_member_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
    audit_writer: Annotated[AuditWriter, Depends(get_audit_writer)],
    runner: Annotated[TransactionRunner, Depends(get_transaction_runner)],
) -> TeamMemberService:
    return TeamMemberService(
        member_repo=TeamMemberRepository(db),
        authorization=authorization,
        audit_writer=audit_writer,
        runner=runner,
    )


# ---- Authentication ----


async def get_current_member_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    member_repo: Annotated[TeamMemberRepository, Depends(get_team_member_repo)],
) -> TeamMemberResult | None:
    """Return the acting member from the JWT if present and active; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    member = await member_repo.get_by_id_and_organization(
        payload["sub"], payload["organization_id"]
    )
    if member is None or not member.is_active:
        return None
    return member


async def get_current_member(
    current_member: Annotated[
        TeamMemberResult | None, Depends(get_current_member_optional)
    ],
    organization_id: Annotated[str, Depends(get_organization_id)],
) -> TeamMemberResult:
    """Return the acting member; 401 if unauthenticated, 403 for another organization."""
    if current_member is None:
        raise AuthenticationException()
    if current_member.organization_id != organization_id:
        raise AuthorizationException(message="Token was issued for another organization")
    return current_member


def require_permission(area: ResourceArea, action: PermissionAction):
    """Dependency factory: require an active member holding area.action."""

    async def _require(
        current_member: Annotated[TeamMemberResult, Depends(get_current_member)],
        authorization: Annotated[
            AuthorizationService, Depends(get_authorization_service)
        ],
    ) -> TeamMemberResult:
        authorization.authorize(current_member, area, action)
        return current_member

    return _require
