"""Outbound webhook event.

Payload shaping is left to the receiving side; the event carries the audit
action as its type plus the identifiers needed to route it.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class WebhookEvent:
    """Best-effort notification of a completed write operation."""

    event_type: str
    org_id: str
    user_id: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
