"""Slack incoming-webhook notifier."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reviewsync.config.http_resilience import slack_resilience

from .http_resilience import ClientFactory, ResilientClient, default_client_factory

if TYPE_CHECKING:
    from types import TracebackType

    from reviewsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class NotificationError(RuntimeError):
    """Raised when the webhook rejects a message."""


@dataclass(slots=True)
class SlackNotifier:
    webhook_url: str
    resilience: ResilienceConfig = field(default_factory=slack_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> SlackNotifier:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(self, payload: dict[str, object]) -> None:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        response = await self._client.post(self.webhook_url, json=payload)
        log.info("Slack webhook answered %s %s", response.status_code, response.text)
        if response.status_code >= 400:
            raise NotificationError(
                f"Failed to send Slack message: {response.text} ({response.status_code})"
            )
