"""Exception handlers that render every failure as application/problem+json."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from northwind_api.application.exceptions import ServiceError
from northwind_api.core.logging_config import get_logger
from northwind_api.core.problem_details import problem_response

logger = get_logger(__name__)

HTTP_TITLES = {
    401: "Unauthorized.",
    403: "Forbidden.",
    404: "Not found.",
    405: "Method not allowed.",
}


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for error in exc.errors():
        # drop the "body"/"query" prefix from the location
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": error.get("msg")})
    return errors


async def service_error_handler(request: Request, exc: ServiceError) -> Response:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={'extra_fields': {'path': request.url.path, 'status_code': exc.status_code}}
    )
    extensions = {"field": exc.field} if getattr(exc, "field", None) else None
    return problem_response(request, exc.status_code, exc.title, exc.message, extensions)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    errors = _validation_errors(exc)
    logger.warning(
        f"Request validation failed: {request.method} {request.url.path}",
        extra={'extra_fields': {'path': request.url.path, 'errors': errors}}
    )
    return problem_response(
        request,
        400,
        "One or more validation errors occurred.",
        "See the errors property for details.",
        {"errors": errors},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    headers = getattr(exc, "headers", None)
    title = HTTP_TITLES.get(exc.status_code, "Request failed.")
    detail = exc.detail if isinstance(exc.detail, str) else None
    return problem_response(request, exc.status_code, title, detail, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
