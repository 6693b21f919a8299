"""
Rate Limiting Configuration

This module provides rate limiting functionality for the web routes.
Login and registration are limited tightly to slow down credential guessing.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different routes
- One limiter per process, switched on or off by RATE_LIMIT_ENABLED at import
- Keyed by client IP; X-Forwarded-For is honoured only when
  TRUST_FORWARDED_FOR is set, since any client can send that header
"""

from slowapi import Limiter
from starlette.requests import Request

from tinyapp.core.setting import settings


def get_client_ip(request: Request) -> str:
    """
    Return the address requests are attributed to, for limits and logs.
    
    Behind a trusted proxy this is the first X-Forwarded-For entry.
    """
    if settings.TRUST_FORWARDED_FOR:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=get_client_ip, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per route
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "login": "10/minute",
    "register": "5/minute",
    "create": "30/minute",
    "redirect": "100/minute",
}
