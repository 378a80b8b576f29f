"""Application services: authorization, diffing, audit writing and querying."""

from app.application.services.audit_query_service import AuditQueryService
from app.application.services.audit_writer import AuditWriter, classify_severity
from app.application.services.authorization_service import AuthorizationService
from app.application.services.diff_service import compute_diff
from app.application.services.permission_resolver import PermissionResolver

__all__ = [
    "AuditQueryService",
    "AuditWriter",
    "AuthorizationService",
    "PermissionResolver",
    "classify_severity",
    "compute_diff",
]
