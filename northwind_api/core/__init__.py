"""Cross-cutting service utilities.

Health checks, structured logging with request context, problem-details
responses and the HTTP middleware pipeline.
"""

from .health import ServiceHealth, HealthStatus
from .logging_config import (
    setup_logging,
    get_logger,
    RequestLoggingMiddleware,
    set_request_context,
    generate_request_id,
    LoggerAdapter,
)
from .middleware import (
    CorrelationIdMiddleware,
    ExceptionHandlingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from .problem_details import problem_response

__all__ = [
    # Health checks
    "ServiceHealth",
    "HealthStatus",
    # Logging
    "setup_logging",
    "get_logger",
    "RequestLoggingMiddleware",
    "set_request_context",
    "generate_request_id",
    "LoggerAdapter",
    # Pipeline
    "CorrelationIdMiddleware",
    "ExceptionHandlingMiddleware",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
    "problem_response",
]
