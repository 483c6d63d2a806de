"""Subject types that can hold a relation on an object.

A TEAM subject stands for "every member of the team": a tuple granted to a
team is reachable by each of its members through one level of indirection.
"""

from enum import Enum


class SubjectType(str, Enum):
    """Subject types for relationship tuples."""

    USER = "user"
    TEAM = "team"
