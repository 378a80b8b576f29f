"""HTTP middleware: request ID and request context.

Applied in main app; order matters (last added = outermost, so the request
ID is assigned before the request context reads it).
Import and use from app.main.
"""

from app.middleware.request_context import RequestContextMiddleware
from app.middleware.request_id import RequestIDMiddleware

__all__ = [
    "RequestContextMiddleware",
    "RequestIDMiddleware",
]
