"""HTTP client for the App Store Connect customer reviews endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, NoReturn

from reviewsync.adapters.http_resilience import (
    ClientFactory,
    ResilientClient,
    default_client_factory,
)
from reviewsync.config.http_resilience import APP_STORE_BASE_URL, app_store_resilience

from .schema import CustomerReviewsResponse, ErrorResponse

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from reviewsync.config.http_resilience import ResilienceConfig

    from .credentials import AppStoreCredentials

log = getLogger(__name__)

PAGE_LIMIT = 200


class AppStoreAPIError(RuntimeError):
    """Raised when App Store Connect answers with an error document."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(slots=True)
class AppStoreClient:
    credentials: AppStoreCredentials
    resilience: ResilienceConfig = field(default_factory=app_store_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> AppStoreClient:
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

    async def list_customer_reviews(
        self,
        resource_id: str,
        next_link: str | None = None,
    ) -> CustomerReviewsResponse:
        """Fetch one page of reviews, newest first.

        ``next_link`` is the absolute URL of a following page and already carries the query.
        """

        headers = {"Authorization": f"Bearer {self.credentials.token()}"}
        if next_link is not None:
            response = await self._http().get(next_link, headers=headers)
        else:
            base_url = self.resilience.base_url or APP_STORE_BASE_URL
            response = await self._http().get(
                f"{base_url}apps/{resource_id}/customerReviews",
                params={"sort": "-createdDate", "limit": PAGE_LIMIT},
                headers=headers,
            )

        if response.is_error:
            _raise_api_error(response)
        return CustomerReviewsResponse.model_validate(response.json())


def _raise_api_error(response: httpx.Response) -> NoReturn:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except ValueError:
        response.raise_for_status()
        raise AppStoreAPIError(
            f"Unexpected status {response.status_code}", status=response.status_code
        ) from None
    details = "; ".join(
        f"{error.code}: {error.detail or error.title}" for error in payload.errors
    )
    log.error(f"App Store Connect API error {response.status_code}: {details}")
    raise AppStoreAPIError(details or response.reason_phrase, status=response.status_code)
