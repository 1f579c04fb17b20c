"""HTTP middleware for the API pipeline.

The order they run in is declared once in ``northwind_api.main.build_middleware``.
"""

import asyncio
import time
import uuid

from cachetools import TTLCache
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from northwind_api.auth_local import decode_access_token
from .logging_config import get_logger, set_request_context
from .problem_details import problem_response

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "
DOCS_PATHS = ("/api/docs", "/api/redoc", "/api/openapi.json")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propagates X-Correlation-Id, generating one when the caller sent none."""

    HEADER_NAME = "X-Correlation-Id"

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(self.HEADER_NAME, "").strip() or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        set_request_context(correlation_id=correlation_id)

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = correlation_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, enable_hsts: bool = True):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        # Legacy XSS auditor is off; CSP covers it
        response.headers["X-XSS-Protection"] = "0"
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"
        if not request.url.path.startswith(DOCS_PATHS):
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
        return response


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """Turns anything the exception handlers did not claim into a 500 problem."""

    def __init__(self, app, expose_details: bool = False):
        super().__init__(app)
        self.expose_details = expose_details

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except asyncio.CancelledError:
            logger.info(
                f"Request aborted by client: {request.method} {request.url.path}",
                extra={'extra_fields': {'path': request.url.path}}
            )
            raise
        except Exception as exc:
            logger.error(
                f"Unhandled exception: {request.method} {request.url.path}",
                exc_info=True,
                extra={'extra_fields': {'path': request.url.path, 'status_code': 500}}
            )
            detail = str(exc) if self.expose_details else "Please contact support with the provided correlationId."
            return problem_response(request, 500, "An unexpected error occurred.", detail)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limit per caller (JWT subject, else client address)."""

    EXEMPT_PREFIXES = ("/health", "/metrics") + DOCS_PATHS

    def __init__(self, app, limit: int = 100, window_seconds: int = 60, enabled: bool = True, maxsize: int = 10000):
        super().__init__(app)
        self.limit = limit
        self.window_seconds = window_seconds
        self.enabled = enabled
        # Entries outlive their window so a late request never resets a full counter
        self._counters: TTLCache = TTLCache(maxsize=maxsize, ttl=window_seconds * 2)

    def _client_key(self, request: Request) -> str:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith(BEARER_PREFIX):
            claims = decode_access_token(auth_header[len(BEARER_PREFIX):].strip())
            if claims and claims.get("sub"):
                return f"sub:{claims['sub']}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.enabled or request.url.path.startswith(self.EXEMPT_PREFIXES):
            return await call_next(request)

        now = time.time()
        window = int(now // self.window_seconds)
        key = (self._client_key(request), window)
        count = self._counters.get(key, 0) + 1
        self._counters[key] = count

        if count > self.limit:
            retry_after = max(int(self.window_seconds - (now % self.window_seconds)), 1)
            logger.warning(
                "Rate limit exceeded",
                extra={'extra_fields': {'client': key[0], 'limit': self.limit, 'path': request.url.path}}
            )
            return problem_response(
                request,
                429,
                "Too many requests.",
                f"Rate limit of {self.limit} requests per {self.window_seconds} seconds exceeded.",
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(self.limit - count, 0))
        return response
