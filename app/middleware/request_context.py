"""Request context middleware.

Stores client IP, user agent, request id and the organization header in
contextvars for the duration of the request. The audit writer stamps the
first two on entries; database sessions use the organization for RLS.
Uses raw ASGI (no BaseHTTPMiddleware) so the context is visible to route
handlers running in the same task.
"""

from typing import Callable

from app.core.tenant_context import set_organization_id
from app.middleware.request_id import _get_header
from app.shared.context import clear_request_context, set_request_context

USER_AGENT_MAX_LENGTH = 512


def _client_ip(scope: dict) -> str | None:
    """First X-Forwarded-For hop, else the socket peer address."""
    forwarded = _get_header(scope, "X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    client = scope.get("client")
    return client[0] if client else None


def RequestContextMiddleware(
    app: Callable, organization_header: str = "X-Organization-ID"
) -> Callable:
    """Populate request and organization context for each HTTP request. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        user_agent = _get_header(scope, "User-Agent")
        set_request_context(
            ip_address=_client_ip(scope),
            user_agent=user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None,
            request_id=scope.get("state", {}).get("request_id"),
        )
        set_organization_id(_get_header(scope, organization_header))
        try:
            await app(scope, receive, send)
        finally:
            clear_request_context()
            set_organization_id(None)

    return asgi_app
