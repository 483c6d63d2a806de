"""Webhook dispatcher protocol (port).

Best effort: ``notify`` never raises and never fails the operation that
triggered it. Delivery problems are logged by the adapter.
"""

from typing import Protocol

from src.domain.entities import WebhookEvent


class WebhookProtocol(Protocol):
    """Outbound notification sink."""

    async def notify(self, event: WebhookEvent) -> None:
        ...
