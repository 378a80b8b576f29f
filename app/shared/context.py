"""Request context management using contextvars.

Provides async-safe storage for request-scoped data that the audit writer
stamps on entries (client IP, user agent, request id). Only set for
requests arriving through the HTTP API; system calls leave it empty.

Usage:
    set_request_context(ip_address="10.0.0.1", user_agent="curl/8")
    ctx = get_request_context()
"""

from contextvars import ContextVar
from dataclasses import dataclass

_current_ip_address: ContextVar[str | None] = ContextVar(
    "current_ip_address", default=None
)
_current_user_agent: ContextVar[str | None] = ContextVar(
    "current_user_agent", default=None
)
_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None


def set_request_context(
    ip_address: str | None = None,
    user_agent: str | None = None,
    request_id: str | None = None,
) -> None:
    """Set the request context for the current async task.

    Call in middleware once per HTTP request.
    """
    _current_ip_address.set(ip_address)
    _current_user_agent.set(user_agent)
    _current_request_id.set(request_id)


def clear_request_context() -> None:
    """Clear the current request context."""
    _current_ip_address.set(None)
    _current_user_agent.set(None)
    _current_request_id.set(None)


def get_request_context() -> RequestContext:
    """Return a snapshot of the current request context."""
    return RequestContext(
        ip_address=_current_ip_address.get(),
        user_agent=_current_user_agent.get(),
        request_id=_current_request_id.get(),
    )
