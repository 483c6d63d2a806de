"""Parsing of authorization inputs at the checker and gate boundary.

Subject type, object type and relation are closed enums. Strings coming from
requests are parsed here; an unknown value or a blank id becomes
``Failure(ValidationError)`` with ``ErrorCode.INVALID_*``, never an
exception and never a denial.
"""

from enum import Enum

from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.authorization_model import is_valid_relation
from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType


def _parse_enum[E: Enum](
    enum_cls: type[E], value: E | str, *, code: ErrorCode, field: str
) -> Result[E, ValidationError]:
    if isinstance(value, enum_cls):
        return Success(value=value)
    try:
        return Success(value=enum_cls(str(value).strip().lower()))
    except ValueError:
        return Failure(
            error=ValidationError(
                code=code,
                message=f"Unknown {field} '{value}'",
                field=field,
            )
        )


def parse_identifier(value: str | None, *, field: str) -> Result[str, ValidationError]:
    """Reject None and blank ids."""
    if value is None or not str(value).strip():
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_ARGUMENT,
                message=f"{field} must not be blank",
                field=field,
            )
        )
    return Success(value=str(value).strip())


def parse_subject(
    subject_id: str | None, subject_type: SubjectType | str
) -> Result[SubjectRef, ValidationError]:
    """Parse a subject reference."""
    match _parse_enum(
        SubjectType, subject_type, code=ErrorCode.INVALID_SUBJECT, field="subject_type"
    ):
        case Failure() as failure:
            return failure
        case Success(value=parsed_type):
            pass
    match parse_identifier(subject_id, field="subject_id"):
        case Failure() as failure:
            return failure
        case Success(value=parsed_id):
            return Success(value=SubjectRef(subject_type=parsed_type, subject_id=parsed_id))


def parse_object_type(value: ObjectType | str) -> Result[ObjectType, ValidationError]:
    return _parse_enum(
        ObjectType, value, code=ErrorCode.INVALID_OBJECT, field="object_type"
    )


def parse_object(
    object_type: ObjectType | str, object_id: str | None
) -> Result[ObjectRef, ValidationError]:
    """Parse an object reference."""
    match parse_object_type(object_type):
        case Failure() as failure:
            return failure
        case Success(value=parsed_type):
            pass
    match parse_identifier(object_id, field="object_id"):
        case Failure() as failure:
            return failure
        case Success(value=parsed_id):
            return Success(value=ObjectRef(object_type=parsed_type, object_id=parsed_id))


def parse_relation(
    relation: Relation | str, object_type: ObjectType
) -> Result[Relation, ValidationError]:
    """Parse a relation and check it exists on ``object_type``."""
    match _parse_enum(
        Relation, relation, code=ErrorCode.INVALID_RELATION, field="relation"
    ):
        case Failure() as failure:
            return failure
        case Success(value=parsed):
            if not is_valid_relation(object_type, parsed):
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_RELATION,
                        message=f"Relation '{parsed.value}' does not exist on "
                        f"'{object_type.value}'",
                        field="relation",
                    )
                )
            return Success(value=parsed)
