"""Spreadsheet-backed reviews table and config sheet reader."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from reviewsync.config.apps import CONFIG_SHEET_NAME, SheetsConfig
from reviewsync.domain.review import CANONICAL_HEADERS
from reviewsync.domain.rows import missing_headers, to_row

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reviewsync.domain.review import CanonicalReview

    from .client import SheetsClient

log = getLogger(__name__)

DEFAULT_REVIEWS_SHEET = "Reviews"


class SheetReviewTable:
    """Reviews table stored in one sheet, with a header row on top.

    Appends are serialized: each one re-reads the headers, so two concurrent first writes
    to an empty sheet would otherwise both add a header row.
    """

    def __init__(self, client: SheetsClient, sheet_name: str = DEFAULT_REVIEWS_SHEET) -> None:
        self.client = client
        self.sheet_name = sheet_name
        self._write_lock = asyncio.Lock()

    @property
    def browser_url(self) -> str:
        return self.client.browser_url

    async def read_all(self) -> tuple[list[str], list[list[str]]]:
        value_range = await self.client.get_values(self.sheet_name)
        if not value_range.values:
            return [], []
        headers, *rows = value_range.values
        return headers, rows

    async def append(self, reviews: Sequence[CanonicalReview]) -> None:
        if not reviews:
            return
        async with self._write_lock:
            headers, _ = await self.read_all()
            prefix: list[list[str]] = []
            if not headers:
                log.info("Reviews sheet %s is empty, writing the header row", self.sheet_name)
                headers = list(CANONICAL_HEADERS)
                prefix.append(headers)

            missing = missing_headers(headers)
            if missing:
                log.error(
                    "The headers of the reviews sheet do not contain all review fields, "
                    "some data will not be written and has to be recovered manually. "
                    "Sheet headers: %s. Missing: %s",
                    headers,
                    [field.value for field in missing],
                )

            rows = prefix + [to_row(review, headers) for review in reviews]
            log.info("Writing %s reviews to reviews sheet %s", len(reviews), self.browser_url)
            response = await self.client.append_values(self.sheet_name, rows)
            log.debug("Appended range %s", response.updates.updated_range)


async def read_sheets_config(
    client: SheetsClient,
    sheet_name: str = CONFIG_SHEET_NAME,
) -> SheetsConfig:
    log.info("Fetching apps config from %s", client.browser_url)
    value_range = await client.get_values(sheet_name)
    return SheetsConfig.from_rows(value_range.values)
