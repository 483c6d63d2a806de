"""Reason codes attached to permission gate decisions.

Only ALLOWED accompanies an allow decision. The deny reasons keep policy
denials apart from decisions that could not be made.
"""

from enum import Enum


class DecisionReason(str, Enum):
    """Why the permission gate allowed or denied a request."""

    ALLOWED = "allowed"
    """Some tuple path grants the relation."""

    DENIED = "denied"
    """Policy says no (no path grants the relation)."""

    MISSING_RESOURCE = "missing_resource"
    """The configured object id source yielded no value."""

    INVALID_ARGUMENT = "invalid_argument"
    """Relation, type or id could not be parsed."""

    UNAVAILABLE = "unavailable"
    """The checker could not reach its datastore."""
