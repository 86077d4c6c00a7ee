"""Authentication middleware.

Every ``/api/*`` request except the public prefixes must carry either a valid
Bearer access token or a cookie session. The resolved user id is stored on
``request.state.auth_user_id`` for the route dependencies.
"""

import logging
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from campus_dashboard.config import PUBLIC_API_PREFIXES
from campus_dashboard.core.security import resolve_request_user_id

logger = logging.getLogger(__name__)


def is_protected_path(path: str) -> bool:
    if not path.startswith("/api/"):
        return False
    return not any(path.startswith(prefix) for prefix in PUBLIC_API_PREFIXES)


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject anonymous requests to protected API paths with 401."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        user_id = resolve_request_user_id(request)
        request.state.auth_user_id = user_id

        # CORS preflight requests never carry credentials
        if request.method != "OPTIONS" and user_id is None and is_protected_path(request.url.path):
            logger.debug("Unauthenticated %s %s", request.method, request.url.path)
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})

        return await call_next(request)
