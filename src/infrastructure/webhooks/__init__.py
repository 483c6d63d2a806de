"""Outbound webhook adapters."""

from src.infrastructure.webhooks.httpx_dispatcher import HttpxWebhookDispatcher

__all__ = ["HttpxWebhookDispatcher"]
