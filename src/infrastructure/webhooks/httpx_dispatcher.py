"""Webhook dispatcher over httpx.

Best effort: ``notify`` POSTs the event as JSON and never raises. Timeouts,
connection errors and non-2xx responses are logged at warning level and
dropped. With no URL configured the dispatcher is a no-op.
"""

from dataclasses import asdict

import httpx

from src.domain.entities import WebhookEvent
from src.domain.protocols import LoggerProtocol


class HttpxWebhookDispatcher:
    """WebhookProtocol implementation.

    Attributes:
        _url: Receiver endpoint, None disables delivery.
        _timeout: Request timeout in seconds.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        url: str | None,
        logger: LoggerProtocol,
        timeout: float = 5.0,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._logger = logger

    @property
    def enabled(self) -> bool:
        return self._url is not None

    async def notify(self, event: WebhookEvent) -> None:
        if self._url is None:
            self._logger.debug("webhook_skipped", event_type=event.event_type)
            return

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    json=asdict(event),
                    headers={"X-Keyward-Event": event.event_type},
                )
        except httpx.TimeoutException as e:
            self._logger.warning(
                "webhook_timeout", event_type=event.event_type, error=str(e)
            )
            return
        except httpx.HTTPError as e:
            self._logger.warning(
                "webhook_connection_error", event_type=event.event_type, error=str(e)
            )
            return

        if response.is_success:
            self._logger.info(
                "webhook_delivered",
                event_type=event.event_type,
                status_code=response.status_code,
            )
        else:
            self._logger.warning(
                "webhook_rejected",
                event_type=event.event_type,
                status_code=response.status_code,
            )
