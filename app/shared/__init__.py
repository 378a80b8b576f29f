"""Shared utilities: context, enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    RequestContext,
    clear_request_context,
    get_request_context,
    set_request_context,
)
from app.shared.enums import ActorType, AuditAction
from app.shared.utils import epoch_millis, generate_cuid, utc_now

__all__ = [
    "ActorType",
    "AuditAction",
    "RequestContext",
    "clear_request_context",
    "epoch_millis",
    "generate_cuid",
    "get_request_context",
    "set_request_context",
    "utc_now",
]
