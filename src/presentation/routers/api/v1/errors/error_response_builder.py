"""Error response builder for RFC 9457 Problem Details.

Converts domain errors returned by command handlers into HTTP responses.
A saga failure is reported by its original cause: an audit outage during a
GPG key creation is a 503, a malformed relation is a 400.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
    status_for_error: HTTP status of a domain error
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.config import get_settings
from src.core.errors import (
    ConflictError,
    DomainError,
    MissingResourceError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
    ValidationError,
)
from src.domain.errors import SagaStepFailure
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_STATUS_BY_TYPE: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (MissingResourceError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (UnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)

HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    409: ("Resource Conflict", "conflict"),
    422: ("Validation Failed", "validation-failed"),
    500: ("Internal Server Error", "internal-server-error"),
    503: ("Service Unavailable", "service-unavailable"),
}


def problem_type(status_code: int) -> str:
    slug = HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[1]
    return f"{get_settings().api_base_url}/errors/{slug}"


def problem_title(status_code: int) -> str:
    return HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[0]


def status_for_error(error: DomainError | BaseException) -> int:
    """HTTP status for a domain error, unwrapping saga failures to their cause."""
    if isinstance(error, SagaStepFailure):
        return status_for_error(error.cause)
    for error_type, status_code in _STATUS_BY_TYPE:
        if isinstance(error, error_type):
            return status_code
    if isinstance(error, DomainError) and error.retryable:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses from domain errors."""

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert a DomainError (or SagaStepFailure) to a JSON response."""
        status_code = status_for_error(error)
        cause = error.cause if isinstance(error, SagaStepFailure) else error

        errors = None
        if isinstance(cause, ValidationError) and cause.field:
            errors = [
                ErrorDetail(field=cause.field, code=cause.code.value, message=cause.message)
            ]

        if isinstance(cause, DomainError):
            detail, code, retryable = cause.message, cause.code.value, cause.retryable
        else:
            detail, code, retryable = "An unexpected error occurred.", None, None

        problem = ProblemDetails(
            type=problem_type(status_code),
            title=problem_title(status_code),
            status=status_code,
            detail=detail,
            instance=str(request.url.path),
            code=code,
            retryable=retryable,
            errors=errors,
        )
        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=(
                {"Retry-After": "1"}
                if status_code == status.HTTP_503_SERVICE_UNAVAILABLE
                else None
            ),
        )
