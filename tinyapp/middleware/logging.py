"""
Request Logging Middleware

Writes one line per request under the "tinyapp.web" logger:

    POST /login 303 12.41ms ip=10.0.0.7 user=3f2a... visitor=-

The identity is read from the session after the route has run, so a
successful login is already attributed to the new user. The client IP comes
from the same function the rate limiter keys on.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from tinyapp.api.session import SESSION_USER_KEY, SESSION_VISITOR_KEY
from tinyapp.core.rate_limit import get_client_ip

logger = logging.getLogger("tinyapp.web")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration, client IP and session identity."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        # absent when the app is built without SessionMiddleware
        session = request.scope.get("session") or {}
        logger.info(
            "%s %s %s %.2fms ip=%s user=%s visitor=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            get_client_ip(request),
            session.get(SESSION_USER_KEY, "-"),
            session.get(SESSION_VISITOR_KEY, "-"),
        )
        return response


def add_logging_middleware(app: FastAPI) -> None:
    """Install request logging inside the session middleware."""
    app.add_middleware(RequestLogMiddleware)
