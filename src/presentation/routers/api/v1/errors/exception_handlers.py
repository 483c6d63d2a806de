"""Global exception handlers for FastAPI application.

Handlers:
    http_exception_handler: Converts HTTPException to RFC 9457 format
    validation_exception_handler: Converts RequestValidationError to RFC 9457 format
    generic_exception_handler: Catches all unhandled exceptions

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.container import get_logger
from src.presentation.routers.api.v1.errors.error_response_builder import (
    problem_title,
    problem_type,
)
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert HTTPException to RFC 9457 Problem Details response.

    A dict ``detail`` (raised by the permission dependency) contributes its
    ``detail``, ``code`` and ``reason_code`` keys.
    """
    assert isinstance(exc, HTTPException)

    extra: dict[str, Any] = {}
    detail = exc.detail
    if isinstance(detail, dict):
        extra = {k: detail.get(k) for k in ("code", "reason_code", "retryable")}
        detail = detail.get("detail", "")

    problem = ProblemDetails(
        type=problem_type(exc.status_code),
        title=problem_title(exc.status_code),
        status=exc.status_code,
        detail=detail if isinstance(detail, str) else str(detail),
        instance=str(request.url.path),
        **extra,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Convert RequestValidationError to RFC 9457 with field-level errors."""
    assert isinstance(exc, RequestValidationError)

    field_errors: list[ErrorDetail] = []
    for error in exc.errors():
        field_parts = [str(p) for p in error.get("loc", []) if p != "body"]
        field_errors.append(
            ErrorDetail(
                field=".".join(field_parts) if field_parts else "unknown",
                code=error.get("type", "validation_error"),
                message=error.get("msg", "Validation failed"),
            )
        )

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    problem = ProblemDetails(
        type=problem_type(status_code),
        title=problem_title(status_code),
        status=status_code,
        detail="Request validation failed. Check 'errors' for details.",
        instance=str(request.url.path),
        errors=field_errors or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log and convert any unhandled exception into a 500 without internals."""
    get_logger().error(
        "unhandled_exception",
        error=exc,
        request_path=request.url.path,
        request_method=request.method,
    )

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    problem = ProblemDetails(
        type=problem_type(status_code),
        title=problem_title(status_code),
        status=status_code,
        detail="An unexpected error occurred.",
        instance=str(request.url.path),
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
