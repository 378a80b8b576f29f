"""Audit log query service: tenant-scoped cursor pagination and filter options."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import replace

from app.application.dtos.audit_log import (
    AuditCursor,
    AuditFilterOptions,
    AuditLogFilters,
    AuditLogPage,
    AuditLogResult,
)
from app.application.interfaces.repositories import IAuditLogRepository
from app.application.services.audit_description import describe_entry
from app.domain.exceptions import ValidationException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def encode_cursor(entry: AuditLogResult) -> str:
    """Opaque continuation token for the entry's sort key."""
    raw = json.dumps([entry.created_at, entry.seq], separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode()).decode().rstrip("=")


def decode_cursor(token: str) -> AuditCursor:
    """Decode a token from encode_cursor; raise ValidationException if malformed."""
    padded = token + "=" * (-len(token) % 4)
    try:
        created_at, seq = json.loads(base64.urlsafe_b64decode(padded))
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError):
        raise ValidationException("Invalid cursor", field="cursor") from None
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (created_at, seq)):
        raise ValidationException("Invalid cursor", field="cursor")
    return AuditCursor(created_at=created_at, seq=seq)


class AuditQueryService:
    """Read side of the audit trail. Every query is bound to one organization."""

    def __init__(
        self,
        audit_repo: IAuditLogRepository,
        *,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        self.audit_repo = audit_repo
        self.default_limit = default_limit
        self.max_limit = max_limit

    def _effective_limit(self, limit: int | None) -> int:
        if limit is None:
            return min(self.default_limit, self.max_limit)
        if limit < 1:
            raise ValidationException("limit must be at least 1", field="limit")
        return min(limit, self.max_limit)

    async def list(
        self,
        organization_id: str,
        filters: AuditLogFilters | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> AuditLogPage:
        """Return one page of entries, newest first, with a continuation token.

        Entries inserted after the first page was served never shift later
        pages: the cursor pins the (created_at, seq) position of the last entry.
        """
        filters = filters or AuditLogFilters()
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            return AuditLogPage(logs=[], has_more=False)
        page_size = self._effective_limit(limit)
        after = decode_cursor(cursor) if cursor else None
        rows = await self.audit_repo.list_page(
            organization_id, filters, after, page_size + 1
        )
        has_more = len(rows) > page_size
        logs = [self._with_description(r) for r in rows[:page_size]]
        next_cursor = encode_cursor(logs[-1]) if has_more and logs else None
        logger.debug(
            "Audit page: org=%s returned=%d has_more=%s",
            organization_id,
            len(logs),
            has_more,
        )
        return AuditLogPage(logs=logs, has_more=has_more, next_cursor=next_cursor)

    async def available_filters(self, organization_id: str) -> AuditFilterOptions:
        """Distinct entity types, actions and actors present in this organization's log."""
        return await self.audit_repo.get_filter_options(organization_id)

    @staticmethod
    def _with_description(entry: AuditLogResult) -> AuditLogResult:
        if entry.description:
            return entry
        return replace(entry, description=describe_entry(entry))
