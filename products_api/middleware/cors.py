"""
Products API - CORS Origin Policy
=================================

What:  Decides which browser origins may call the API and rejects the rest.
How:   ``is_origin_allowed`` is a pure function over the configured allowlist.
       ``OriginGuardMiddleware`` applies it to every request and answers
       403 ``{"error": "CORS error"}`` for a disallowed Origin header.
       Allowed requests continue to Starlette's CORSMiddleware, configured
       with the same allowlist, which adds the response headers.

Requests without an Origin header (curl, server-to-server, tests) are
always allowed.
"""

import logging
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from products_api.exceptions import OriginNotAllowedError

logger = logging.getLogger(__name__)


def is_origin_allowed(origin: Optional[str], allowed_origins: Iterable[str]) -> bool:
    """
    True when ``origin`` is absent or exactly matches one allowlisted origin.

    Comparison ignores a trailing slash; scheme, host and port must match.
    """
    if not origin:
        return True
    normalized = origin.strip().rstrip("/")
    return normalized in {allowed.rstrip("/") for allowed in allowed_origins}


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests whose Origin header is outside the allowlist.

    Runs before CORSMiddleware, so preflight (OPTIONS) requests from a
    rejected origin get the same 403.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = tuple(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        if is_origin_allowed(origin, self.allowed_origins):
            return await call_next(request)

        error = OriginNotAllowedError(origin)
        logger.warning(
            "Rejected %s %s from origin %s (allowed: %s)",
            request.method,
            request.url.path,
            error.origin,
            ", ".join(self.allowed_origins) or "none",
        )
        return JSONResponse(status_code=403, content={"error": error.message})
