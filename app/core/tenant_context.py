"""Organization context for RLS (row-level security).

Middleware sets the current organization_id in this context variable so that
get_db / get_db_transactional can run SET LOCAL app.current_organization_id
on the session. With the audit_log RLS policy enabled, only rows for that
organization are visible.
"""

from contextvars import ContextVar

# Current organization ID for the request (set by middleware, read by DB session setup).
current_organization_id: ContextVar[str | None] = ContextVar(
    "current_organization_id", default=None
)


def set_organization_id(organization_id: str | None) -> None:
    """Set the current organization ID for this context (e.g. request)."""
    current_organization_id.set(organization_id)


def get_organization_id() -> str | None:
    """Return the current organization ID if set."""
    return current_organization_id.get()
