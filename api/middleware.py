"""
FastAPI middleware for request logging, timing and security headers.
"""
import time
import logging
from typing import Awaitable, Callable

from fastapi import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS_HEADER = "max-age=31536000; includeSubDomains"


def build_request_middleware(is_production: bool) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """Middleware that logs API calls and stamps security headers"""

    async def log_requests_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        # Only over HTTPS
        if is_production:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER

        # Only log API endpoints, not static files
        if request.url.path.startswith("/api/"):
            logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")

        return response

    return log_requests_middleware
