"""Request id and request context middleware (raw ASGI)."""

from app.core.tenant_context import get_organization_id
from app.middleware import RequestContextMiddleware
from app.middleware.request_id import resolve_request_id
from app.shared.context import get_request_context


def test_resolve_request_id_keeps_safe_value() -> None:
    assert resolve_request_id("abc-123_X") == "abc-123_X"


def test_resolve_request_id_replaces_unsafe_value() -> None:
    generated = resolve_request_id("bad id\n")
    assert generated != "bad id\n"
    assert len(generated) == 36


def test_resolve_request_id_generates_when_missing() -> None:
    assert resolve_request_id(None) != resolve_request_id(None)


async def _noop_receive() -> dict:
    return {"type": "http.request"}


async def _noop_send(message: dict) -> None:
    return None


async def test_request_context_visible_to_app_and_cleared_after() -> None:
    seen = {}

    async def inner(scope, receive, send) -> None:
        seen["ctx"] = get_request_context()
        seen["org"] = get_organization_id()

    middleware = RequestContextMiddleware(inner)
    scope = {
        "type": "http",
        "headers": [
            (b"user-agent", b"crm-web/2.1"),
            (b"x-forwarded-for", b"203.0.113.7, 10.0.0.1"),
            (b"x-organization-id", b"org_acme"),
        ],
        "client": ("10.0.0.1", 5000),
        "state": {"request_id": "req1"},
    }
    await middleware(scope, _noop_receive, _noop_send)

    assert seen["ctx"].ip_address == "203.0.113.7"
    assert seen["ctx"].user_agent == "crm-web/2.1"
    assert seen["ctx"].request_id == "req1"
    assert seen["org"] == "org_acme"
    assert get_request_context().ip_address is None
    assert get_organization_id() is None


async def test_request_context_falls_back_to_peer_address() -> None:
    seen = {}

    async def inner(scope, receive, send) -> None:
        seen["ip"] = get_request_context().ip_address

    middleware = RequestContextMiddleware(inner)
    await middleware(
        {"type": "http", "headers": [], "client": ("10.0.0.9", 5000)},
        _noop_receive,
        _noop_send,
    )
    assert seen["ip"] == "10.0.0.9"
