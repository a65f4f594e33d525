"""Notifier adapters: chat webhook delivery and a log-only fallback."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from poisync.adapters.http_resilience import ResilientClient
from poisync.config.upstream import WebhookConfig, get_webhook_config
from poisync.domain.ports.notification import Notifier

if TYPE_CHECKING:
    from collections.abc import Callable

    from poisync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

# InvalidURL and StreamError sit outside httpx.HTTPError.
DELIVERY_FAILURES: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    httpx.InvalidURL,
    httpx.StreamError,
    OSError,
    ValueError,
)


class WebhookNotifier:
    """POST ``{"content": message}`` to a chat webhook; failures are logged, never raised."""

    def __init__(
        self,
        *,
        config: WebhookConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_webhook_config()
        if self._config.url is None:
            raise ValueError("WebhookNotifier requires a webhook URL")
        self._url = self._config.url
        self._client_factory = client_factory or ResilientClient

    def notify(self, message: str) -> None:
        log.info("Notification: %s", message)
        try:
            asyncio.run(self._post(message))
        except DELIVERY_FAILURES as exc:
            log.warning("Failed to deliver notification: %s", exc)

    async def _post(self, message: str) -> None:
        async with self._client_factory(self._config.resilience) as client:
            response = await client.post(self._url, json={"content": message})
            response.raise_for_status()


class LoggingNotifier:
    def notify(self, message: str) -> None:
        log.info("Notification: %s", message)


def build_notifier(config: WebhookConfig | None = None) -> Notifier:
    config = config or get_webhook_config()
    if config.enabled:
        return WebhookNotifier(config=config)
    log.info("No webhook configured; notifications will only be logged")
    return LoggingNotifier()


if TYPE_CHECKING:
    _notifier_check: Notifier = LoggingNotifier()
