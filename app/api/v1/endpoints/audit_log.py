"""Audit log API: organization-scoped audit trail (who did what, when)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import (
    get_audit_query_service,
    get_organization_id,
    require_permission,
)
from app.application.dtos.audit_log import AuditLogFilters
from app.application.services.audit_query_service import AuditQueryService
from app.domain.enums import PermissionAction, ResourceArea, Severity
from app.schemas.audit_log import AuditFilterOptionsResponse, AuditLogListResponse

router = APIRouter()

_require_audit_view = require_permission(ResourceArea.AUDIT_LOGS, PermissionAction.VIEW)


@router.get("", response_model=AuditLogListResponse)
async def list_audit_log(
    organization_id: Annotated[str, Depends(get_organization_id)],
    service: Annotated[AuditQueryService, Depends(get_audit_query_service)],
    _: Annotated[object, Depends(_require_audit_view)],
    severity: Severity | None = Query(None),
    entity_type: str | None = Query(None, alias="entityType"),
    action: str | None = Query(None),
    actor_id: str | None = Query(None, alias="actorId"),
    start_date: int | None = Query(
        None, alias="startDate", ge=0, description="From (inclusive), epoch ms"
    ),
    end_date: int | None = Query(
        None, alias="endDate", ge=0, description="To (inclusive), epoch ms"
    ),
    cursor: str | None = Query(None, description="nextCursor from the previous page"),
    limit: int | None = Query(None, ge=1, description="Page size; capped at the configured maximum"),
):
    """List audit entries newest first, one cursor page at a time."""
    filters = AuditLogFilters(
        severity=severity.value if severity else None,
        entity_type=entity_type,
        action=action,
        actor_id=actor_id,
        start_date=start_date,
        end_date=end_date,
    )
    page = await service.list(organization_id, filters, cursor=cursor, limit=limit)
    return AuditLogListResponse.model_validate(page)


@router.get("/filters", response_model=AuditFilterOptionsResponse)
async def get_audit_filters(
    organization_id: Annotated[str, Depends(get_organization_id)],
    service: Annotated[AuditQueryService, Depends(get_audit_query_service)],
    _: Annotated[object, Depends(_require_audit_view)],
):
    """Distinct entity types, actions and actors for the filter pickers."""
    options = await service.available_filters(organization_id)
    return AuditFilterOptionsResponse.model_validate(options)
