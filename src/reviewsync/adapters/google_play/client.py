"""HTTP client for the Google Play Developer API reviews resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, NoReturn

from reviewsync.adapters.http_resilience import (
    ClientFactory,
    ResilientClient,
    default_client_factory,
)
from reviewsync.config.http_resilience import GOOGLE_PLAY_BASE_URL, google_play_resilience

from .schema import ErrorResponse, ReviewsListResponse

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from reviewsync.adapters.google_auth import GoogleCredentials
    from reviewsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class GooglePlayAPIError(RuntimeError):
    """Raised when the Google Play Developer API returns an error payload."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class GooglePlayClient:
    """Reviews endpoint of the Play Developer API.

    The API only returns reviews created or modified during the last week; older reviews
    are only available from the archived reports in Cloud Storage.
    """

    credentials: GoogleCredentials
    resilience: ResilienceConfig = field(default_factory=google_play_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> GooglePlayClient:
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

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client

    async def list_reviews(
        self,
        package_name: str,
        token: str | None = None,
    ) -> ReviewsListResponse:
        params: dict[str, str] = {}
        if token is not None:
            params["token"] = token
        base_url = self.resilience.base_url or GOOGLE_PLAY_BASE_URL
        response = await self._http().get(
            f"{base_url}applications/{package_name}/reviews",
            params=params,
            headers={
                "Accept": "application/json",
                **await self.credentials.authorization(),
            },
        )

        if response.is_error:
            _raise_api_error(response)

        payload = response.json() if response.content else {}
        return ReviewsListResponse.model_validate(payload)


def _raise_api_error(response: httpx.Response) -> NoReturn:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and "error" in payload:
        error = ErrorResponse.model_validate(payload).error
        log.error(f"Google Play API error {error.code}: {error.message}")
        raise GooglePlayAPIError(error.message, code=error.code)
    response.raise_for_status()
    raise GooglePlayAPIError(f"Unexpected status {response.status_code}")
