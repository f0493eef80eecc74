"""Security middleware for FastAPI application.

This module provides ASGI middleware for:
- Security headers (X-Request-Id, HSTS, etc.) and the unhandled-error guard
- IP-based rate limiting
"""

from .ip_rate_limit import IPRateLimitMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "IPRateLimitMiddleware",
]
