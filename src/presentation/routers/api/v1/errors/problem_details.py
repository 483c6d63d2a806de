"""RFC 9457 Problem Details for HTTP APIs.

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 9457 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Individual field-specific error (validation failures)."""

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details response body.

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:8000/errors/forbidden",
        ...     title="Access Denied",
        ...     status=403,
        ...     detail="Permission denied: can_edit on app:app-1",
        ...     instance="/api/v1/apps/app-1/access",
        ...     reason_code="denied",
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:8000/errors/forbidden"],
    )
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="Request path of this occurrence")
    code: str | None = Field(None, description="Machine-readable error code")
    reason_code: str | None = Field(
        None,
        description="Permission gate decision reason, for gate denials",
    )
    retryable: bool | None = Field(None, description="Whether retrying may succeed")
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of field-specific errors",
    )
