"""Result types for railway-oriented programming.

Operations that can fail return ``Success`` or ``Failure`` instead of raising,
so every caller decides explicitly what a failure means for it. The checker
uses this to keep "not allowed" (``Success(False)``) apart from "could not
determine" (``Failure(UnavailableError)``).

Usage:
    result = await authz.check(
        subject_id=user_id,
        subject_type=SubjectType.USER,
        relation=Relation.CAN_EDIT,
        object_type=ObjectType.APP,
        object_id=app_id,
    )
    match result:
        case Success(value=True):
            ...
        case Success(value=False):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
