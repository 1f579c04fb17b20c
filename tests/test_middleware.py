import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware import Middleware

from northwind_api.api.errors import register_exception_handlers
from northwind_api.core_settings import get_settings
from northwind_api.core.middleware import (
    CorrelationIdMiddleware,
    ExceptionHandlingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from northwind_api.core.logging_config import RequestLoggingMiddleware, SecurityFilter
from northwind_api.main import build_middleware, create_app


def build_app(*middleware):
    app = FastAPI(middleware=list(middleware))
    register_exception_handlers(app)

    @app.get("/ping")
    def ping():
        return {"pong": True}

    @app.get("/boom")
    def boom():
        raise RuntimeError("database exploded")

    @app.get("/health")
    def health():
        return {"status": "pass"}

    return app


def test_pipeline_order_is_declared_outermost_first():
    names = [m.cls.__name__ for m in build_middleware(get_settings())]
    assert names == [
        "CorrelationIdMiddleware",
        "SecurityHeadersMiddleware",
        "RequestLoggingMiddleware",
        "ExceptionHandlingMiddleware",
        "RateLimitMiddleware",
        "CORSMiddleware",
    ]


def test_correlation_id_is_echoed_or_generated(anonymous_client):
    resp = anonymous_client.get("/health", headers={"X-Correlation-Id": "abc-123"})
    assert resp.headers["X-Correlation-Id"] == "abc-123"

    resp = anonymous_client.get("/health")
    generated = resp.headers["X-Correlation-Id"]
    assert len(generated) == 32
    assert resp.headers["X-Request-ID"]


def test_security_headers(anonymous_client):
    resp = anonymous_client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["Referrer-Policy"] == "no-referrer"
    assert "default-src 'none'" in resp.headers["Content-Security-Policy"]
    # HSTS is only sent outside development and testing
    assert "Strict-Transport-Security" not in resp.headers


def test_docs_are_not_blocked_by_csp(anonymous_client):
    resp = anonymous_client.get("/api/docs")
    assert resp.status_code == 200
    assert "Content-Security-Policy" not in resp.headers


def test_problem_details_shape(anonymous_client):
    resp = anonymous_client.get("/api/v1/customers", headers={"X-Correlation-Id": "corr-1", "X-Request-ID": "req-1"})
    body = resp.json()
    assert body["type"] == "https://httpstatuses.com/401"
    assert body["title"] == "Unauthorized."
    assert body["status"] == 401
    assert body["instance"] == "/api/v1/customers"
    assert body["traceId"] == "req-1"
    assert body["correlationId"] == "corr-1"


def test_unknown_route_is_a_problem(anonymous_client):
    resp = anonymous_client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["status"] == 404


def test_unhandled_error_shows_detail_in_development():
    app = build_app(
        Middleware(CorrelationIdMiddleware),
        Middleware(RequestLoggingMiddleware),
        Middleware(ExceptionHandlingMiddleware, expose_details=True),
    )
    resp = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["title"] == "An unexpected error occurred."
    assert body["detail"] == "database exploded"
    assert body["correlationId"] == resp.headers["X-Correlation-Id"]


def test_unhandled_error_hides_detail_in_production():
    app = build_app(
        Middleware(CorrelationIdMiddleware),
        Middleware(ExceptionHandlingMiddleware, expose_details=False),
    )
    body = TestClient(app, raise_server_exceptions=False).get("/boom").json()
    assert body["detail"] == "Please contact support with the provided correlationId."
    assert "database exploded" not in str(body)


def test_security_headers_with_hsts():
    app = build_app(Middleware(SecurityHeadersMiddleware, enable_hsts=True))
    resp = TestClient(app).get("/ping")
    assert resp.headers["Strict-Transport-Security"].startswith("max-age=")


def test_rate_limit_per_client():
    app = build_app(Middleware(RateLimitMiddleware, limit=2, window_seconds=60))
    client = TestClient(app)

    first = client.get("/ping")
    assert first.headers["X-RateLimit-Limit"] == "2"
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert client.get("/ping").status_code == 200

    limited = client.get("/ping")
    assert limited.status_code == 429
    assert int(limited.headers["Retry-After"]) >= 1
    assert limited.json()["title"] == "Too many requests."

    # health checks are never limited
    assert client.get("/health").status_code == 200


def test_rate_limit_is_keyed_by_token_subject(token_factory):
    app = build_app(Middleware(RateLimitMiddleware, limit=1, window_seconds=60))
    client = TestClient(app)

    assert client.get("/ping", headers=token_factory(subject="alice")).status_code == 200
    assert client.get("/ping", headers=token_factory(subject="alice")).status_code == 429
    assert client.get("/ping", headers=token_factory(subject="bob")).status_code == 200


def test_rate_limit_can_be_disabled():
    app = build_app(Middleware(RateLimitMiddleware, limit=1, window_seconds=60, enabled=False))
    client = TestClient(app)
    assert [client.get("/ping").status_code for _ in range(3)] == [200, 200, 200]


def test_create_app_mounts_resources_under_prefix():
    paths = set(create_app().openapi()["paths"])
    assert {"/api/v1/customers", "/api/v1/products/{product_id}", "/api/v1/orders/{order_id}/items"} <= paths
    assert "/auth/token" in paths


@pytest.mark.parametrize("message,expected", [
    ("Request started: POST /auth/token", "Request started: POST /auth/token"),
    ("login failed password=hunter2 for alice", "login failed password=***REDACTED*** for alice"),
    ("Token: abc.def.ghi", "Token: ***REDACTED***"),
])
def test_security_filter_redacts_values_not_words(message, expected):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
    assert SecurityFilter().filter(record) is True
    assert record.msg == expected
