"""Mock transports for the HTTP adapters."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import httpx

from reviewsync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from reviewsync.adapters.http_resilience import ClientFactory
    from reviewsync.config.http_resilience import ResilienceConfig


def make_client_factory(handler: Callable[[httpx.Request], httpx.Response]) -> ClientFactory:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(replace(resilience, cache=None, ratelimit=None))
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


class FakeGoogleCredentials:
    def __init__(self, token: str = "google-token") -> None:
        self._token = token

    async def token(self) -> str:
        return self._token

    async def authorization(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}


class FakeAppStoreCredentials:
    def __init__(self, token: str = "apple-token") -> None:
        self._token = token

    def token(self) -> str:
        return self._token
