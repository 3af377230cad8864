"""Minimal client for the values API of one Google spreadsheet."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, NoReturn
from urllib.parse import quote

from reviewsync.adapters.http_resilience import (
    ClientFactory,
    ResilientClient,
    default_client_factory,
)
from reviewsync.config.http_resilience import SHEETS_BASE_URL, sheets_resilience

from .schema import (
    AppendValuesResponse,
    ErrorResponse,
    InsertDataOption,
    ValueInputOption,
    ValueRange,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    import httpx

    from reviewsync.adapters.google_auth import GoogleCredentials
    from reviewsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

BROWSER_BASE_URL = "https://docs.google.com/spreadsheets/d/"


class SheetsAPIError(RuntimeError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(slots=True)
class SheetsClient:
    credentials: GoogleCredentials
    spreadsheet_id: str
    resilience: ResilienceConfig = field(default_factory=sheets_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> SheetsClient:
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

    @property
    def browser_url(self) -> str:
        return f"{BROWSER_BASE_URL}{self.spreadsheet_id}"

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client

    def _values_url(self, range_: str) -> str:
        base_url = self.resilience.base_url or SHEETS_BASE_URL
        return f"{base_url}{self.spreadsheet_id}/values/{quote(range_, safe='')}"

    async def get_values(self, range_: str) -> ValueRange:
        response = await self._http().get(
            self._values_url(range_),
            headers=await self.credentials.authorization(),
        )
        if response.is_error:
            _raise_api_error(response)
        return ValueRange.model_validate(response.json())

    async def append_values(
        self,
        range_: str,
        rows: Sequence[Sequence[str]],
        *,
        value_input_option: ValueInputOption = ValueInputOption.USER_ENTERED,
        insert_data_option: InsertDataOption = InsertDataOption.INSERT_ROWS,
    ) -> AppendValuesResponse:
        body = {"range": range_, "values": [list(row) for row in rows]}
        response = await self._http().post(
            f"{self._values_url(range_)}:append",
            params={
                "valueInputOption": value_input_option.value,
                "insertDataOption": insert_data_option.value,
            },
            json=body,
            headers=await self.credentials.authorization(),
        )
        if response.is_error:
            _raise_api_error(response)
        return AppendValuesResponse.model_validate(response.json())


def _raise_api_error(response: httpx.Response) -> NoReturn:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except ValueError:
        response.raise_for_status()
        raise SheetsAPIError(
            f"Unexpected status {response.status_code}", status=response.status_code
        ) from None
    message = payload.error.message or response.reason_phrase
    log.error(f"Google Sheets API error {response.status_code}: {message}")
    raise SheetsAPIError(message, status=response.status_code)
