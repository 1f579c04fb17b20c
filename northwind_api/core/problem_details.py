"""RFC 7807 problem responses shared by the exception handlers and middleware."""

from typing import Any, Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from .logging_config import correlation_id_var, request_id_var, generate_request_id

PROBLEM_CONTENT_TYPE = "application/problem+json"


def problem_body(
    request: Request,
    status_code: int,
    title: str,
    detail: Optional[str] = None,
    extensions: Optional[Mapping[str, Any]] = None,
) -> dict:
    trace_id = getattr(request.state, "request_id", None) or request_id_var.get() or generate_request_id()
    correlation_id = getattr(request.state, "correlation_id", None) or correlation_id_var.get()

    body = {
        "type": f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
        "traceId": trace_id,
    }
    if correlation_id:
        body["correlationId"] = correlation_id
    if extensions:
        body.update(extensions)
    return body


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    detail: Optional[str] = None,
    extensions: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=problem_body(request, status_code, title, detail, extensions),
        media_type=PROBLEM_CONTENT_TYPE,
        headers=dict(headers) if headers else None,
    )
