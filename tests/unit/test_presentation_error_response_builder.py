"""Unit tests for RFC 9457 error responses built from domain errors.

Tests cover:
- Status mapping per error type
- Saga failures reported by their original cause
- Field errors for validation failures
- Retry-After on 503
"""

import json

import pytest
from starlette.requests import Request

from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    MissingResourceError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
    ValidationError,
)
from src.domain.errors import AuditError, SagaStepFailure
from src.presentation.routers.api.v1.errors.error_response_builder import (
    ErrorResponseBuilder,
    status_for_error,
)


def request(path: str = "/api/v1/gpg-keys") -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": path,
            "query_string": b"",
            "headers": [],
        }
    )


def saga_failure(cause) -> SagaStepFailure:
    return SagaStepFailure(
        message="Saga gpg_key_create failed at audit",
        saga_name="gpg_key_create",
        step_name="audit",
        cause=cause,
    )


AUDIT_DOWN = AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="audit db down")


@pytest.mark.unit
class TestStatusForError:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ValidationError(code=ErrorCode.INVALID_RELATION, message="bad"), 400),
            (MissingResourceError(code=ErrorCode.MISSING_RESOURCE, message="none"), 400),
            (PermissionDeniedError(code=ErrorCode.PERMISSION_DENIED, message="no"), 403),
            (NotFoundError(code=ErrorCode.ROLE_NOT_FOUND, message="gone"), 404),
            (ConflictError(code=ErrorCode.ROLE_ALREADY_EXISTS, message="dup"), 409),
            (UnavailableError(code=ErrorCode.TUPLE_STORE_UNAVAILABLE, message="down"), 503),
        ],
    )
    def test_mapping(self, error, expected):
        assert status_for_error(error) == expected

    def test_retryable_domain_error_is_503(self):
        assert status_for_error(AUDIT_DOWN) == 503

    def test_non_retryable_unknown_error_is_500(self):
        error = DomainError(code=ErrorCode.SAGA_COMPENSATION_FAILED, message="x")

        assert status_for_error(error) == 500

    def test_saga_failure_uses_cause(self):
        conflict = ConflictError(code=ErrorCode.GPG_KEY_ALREADY_EXISTS, message="dup")

        assert status_for_error(saga_failure(conflict)) == 409

    def test_saga_failure_with_exception_cause_is_500(self):
        assert status_for_error(saga_failure(RuntimeError("boom"))) == 500


@pytest.mark.unit
class TestErrorResponseBuilder:
    def test_saga_failure_reports_cause(self):
        response = ErrorResponseBuilder.from_domain_error(saga_failure(AUDIT_DOWN), request())

        body = json.loads(response.body)
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        assert body["code"] == "audit_record_failed"
        assert body["detail"] == "audit db down"
        assert body["retryable"] is True
        assert body["instance"] == "/api/v1/gpg-keys"
        assert body["type"].endswith("/errors/service-unavailable")

    def test_validation_error_lists_field(self):
        error = ValidationError(
            code=ErrorCode.INVALID_RELATION,
            message="Relation can_sign is not defined on app",
            field="relation",
        )

        response = ErrorResponseBuilder.from_domain_error(error, request())

        body = json.loads(response.body)
        assert response.status_code == 400
        assert "Retry-After" not in response.headers
        assert body["errors"] == [
            {
                "field": "relation",
                "code": "invalid_relation",
                "message": "Relation can_sign is not defined on app",
            }
        ]

    def test_exception_cause_hides_message(self):
        response = ErrorResponseBuilder.from_domain_error(
            saga_failure(RuntimeError("secret internals")), request()
        )

        body = json.loads(response.body)
        assert response.status_code == 500
        assert "secret internals" not in body["detail"]
        assert "code" not in body
