"""SQL reviews table, an alternative to the spreadsheet for local runs."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from sqlalchemy import Column, Integer, MetaData, Table, Text, create_engine, insert, select

from reviewsync.domain.review import CANONICAL_HEADERS
from reviewsync.domain.rows import NULL_MARKER, to_row

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.engine import Engine

    from reviewsync.domain.review import CanonicalReview

log = logging.getLogger(__name__)

DEFAULT_TABLE_NAME: Final[str] = "reviews"
_ROW_ID: Final[str] = "_row_id"


def build_reviews_table(metadata: MetaData, name: str = DEFAULT_TABLE_NAME) -> Table:
    """One nullable text column per review field, in header order."""

    return Table(
        name,
        metadata,
        Column(_ROW_ID, Integer, primary_key=True, autoincrement=True),
        *(Column(header, Text, nullable=True) for header in CANONICAL_HEADERS),
    )


class SqlAlchemyReviewTable:
    """Append-only reviews table; NULL columns are exchanged as the null marker."""

    def __init__(self, engine: Engine, table_name: str = DEFAULT_TABLE_NAME) -> None:
        self.engine = engine
        self.metadata = MetaData()
        self.table = build_reviews_table(self.metadata, table_name)
        self._schema_ready = False
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_uri(cls, uri: str, table_name: str = DEFAULT_TABLE_NAME) -> SqlAlchemyReviewTable:
        return cls(create_engine(uri), table_name)

    async def read_all(self) -> tuple[list[str], list[list[str]]]:
        return await asyncio.to_thread(self._read_all)

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self.metadata.create_all(self.engine)
            self._schema_ready = True

    def _read_all(self) -> tuple[list[str], list[list[str]]]:
        self._ensure_schema()
        columns = [self.table.c[header] for header in CANONICAL_HEADERS]
        statement = select(*columns).order_by(self.table.c[_ROW_ID])
        with self.engine.connect() as connection:
            rows = [
                [NULL_MARKER if value is None else value for value in row]
                for row in connection.execute(statement)
            ]
        if not rows:
            return [], []
        return list(CANONICAL_HEADERS), rows

    async def append(self, reviews: Sequence[CanonicalReview]) -> None:
        if not reviews:
            return
        values = [
            {
                header: None if cell == NULL_MARKER else cell
                for header, cell in zip(
                    CANONICAL_HEADERS, to_row(review, CANONICAL_HEADERS), strict=True
                )
            }
            for review in reviews
        ]
        async with self._write_lock:
            await asyncio.to_thread(self._insert, values)
        log.info("Wrote %s reviews to table %s", len(values), self.table.name)

    def _insert(self, values: list[dict[str, str | None]]) -> None:
        self._ensure_schema()
        with self.engine.begin() as connection:
            connection.execute(insert(self.table), values)
