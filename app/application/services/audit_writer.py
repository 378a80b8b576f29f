"""Audit writer: appends one immutable, described audit entry per mutation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from app.application.dtos.audit_log import AuditActor, AuditChanges, AuditLogEntryCreate
from app.application.interfaces.repositories import IAuditLogRepository
from app.application.services.audit_description import describe
from app.application.services.audit_metadata import normalize_metadata
from app.domain.enums import Severity
from app.domain.exceptions import IntegrityViolationException
from app.shared.context import get_request_context
from app.shared.enums import ActorType, AuditAction
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import epoch_millis

logger = get_logger(__name__)

# (entity_type, action) pairs whose severity differs from the per-action default.
_SEVERITY_OVERRIDES: dict[tuple[str, str], Severity] = {
    ("teamMember", AuditAction.DELETE.value): Severity.HIGH,
    ("apiKey", AuditAction.DELETE.value): Severity.HIGH,
    ("webhook", AuditAction.DELETE.value): Severity.HIGH,
    ("organization", AuditAction.DELETE.value): Severity.CRITICAL,
}

_SEVERITY_BY_ACTION: dict[str, Severity] = {
    AuditAction.CREATE.value: Severity.MEDIUM,
    AuditAction.UPDATE.value: Severity.LOW,
    AuditAction.DELETE.value: Severity.MEDIUM,
    AuditAction.MOVE.value: Severity.MEDIUM,
    AuditAction.ASSIGN.value: Severity.MEDIUM,
    AuditAction.HANDOFF.value: Severity.MEDIUM,
}


def classify_severity(
    entity_type: str, action: AuditAction | str, *, access_change: bool = False
) -> Severity:
    """Return the fixed severity for a mutation; callers pass it to the writer.

    access_change marks role/permission changes on a team member (high).
    """
    action_value = action.value if isinstance(action, AuditAction) else action
    if access_change:
        return Severity.HIGH
    override = _SEVERITY_OVERRIDES.get((entity_type, action_value))
    if override is not None:
        return override
    return _SEVERITY_BY_ACTION.get(action_value, Severity.LOW)


class AuditWriter:
    """Writes audit entries through the repository bound to the caller's session.

    Must be called inside the same transaction as the mutation it describes,
    so a rolled-back mutation leaves no entry behind. Performs exactly one
    insert: no notifications, no nested audit entries.
    """

    def __init__(
        self,
        audit_repo: IAuditLogRepository,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.audit_repo = audit_repo
        self.clock = clock

    async def record(
        self,
        *,
        organization_id: str,
        entity_type: str,
        entity_id: str,
        action: AuditAction | str,
        actor: AuditActor,
        severity: Severity | str,
        changes: AuditChanges | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Validate, describe and persist one audit entry; return its id.

        Raises:
            IntegrityViolationException: severity, action or actor type is not a known value.
            ValidationException: metadata does not fit the entity type's shape.
        """
        severity_value = _enum_value(Severity, severity, "severity")
        action_value = _enum_value(AuditAction, action, "action")
        actor_type = _enum_value(ActorType, actor.type, "actor_type")
        normalized = normalize_metadata(entity_type, metadata)
        changes_dict = changes.to_dict() if changes is not None else None
        description = describe(
            action_value,
            entity_type,
            actor_name=actor.name,
            metadata=normalized,
            changes=changes_dict,
        )
        request_ctx = get_request_context()
        entry = AuditLogEntryCreate(
            organization_id=organization_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action_value,
            actor_id=actor.id,
            actor_type=actor_type,
            actor_name=actor.name,
            changes=changes_dict,
            metadata=normalized,
            description=description,
            severity=severity_value,
            created_at=self.clock(),
            ip_address=request_ctx.ip_address,
            user_agent=request_ctx.user_agent,
        )
        created = await self.audit_repo.create(entry)
        logger.debug(
            "Audit entry %s: org=%s %s %s/%s severity=%s",
            created.id,
            organization_id,
            action_value,
            entity_type,
            entity_id,
            severity_value,
        )
        return created.id


def _enum_value(enum_cls: Any, value: Any, field: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        raise IntegrityViolationException(
            f"Invalid {field}: {value!r}", field=field, value=str(value)
        ) from None
