"""JWT verification for authentication (python-jose).

Tokens are issued by the identity provider in front of this service. The
subject is the team member id; organization_id names the tenant the token
was issued for. create_access_token exists for local tooling and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings

DEFAULT_TOKEN_TTL = timedelta(hours=8)


def create_access_token(
    member_id: str,
    organization_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed token for a team member of one organization."""
    settings = get_settings()
    claims: dict[str, Any] = {
        "sub": member_id,
        "organization_id": organization_id,
        "exp": datetime.now(UTC) + (expires_delta or DEFAULT_TOKEN_TTL),
    }
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp, sub and organization_id.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    if not payload.get("organization_id"):
        raise ValueError("Token missing required claim: organization_id")
    return payload
