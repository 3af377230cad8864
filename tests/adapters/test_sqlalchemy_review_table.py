from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect, select
from sqlalchemy.pool import StaticPool

from reviewsync.adapters.sqlalchemy import SqlAlchemyReviewTable
from reviewsync.domain.review import CANONICAL_HEADERS, Store
from reviewsync.domain.rows import NULL_MARKER, from_row
from reviewsync.domain.sync import sync_reviews
from tests.helpers.reviews import FakeReviewSource, make_review

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine

    from reviewsync.domain.review import Customer


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


def test_table_is_created_on_first_read(sqlite_engine: Engine) -> None:
    table = SqlAlchemyReviewTable(sqlite_engine)

    assert not inspect(sqlite_engine).has_table("reviews")
    assert asyncio.run(table.read_all()) == ([], [])
    assert inspect(sqlite_engine).has_table("reviews")


def test_append_then_read_back(sqlite_engine: Engine) -> None:
    table = SqlAlchemyReviewTable(sqlite_engine)
    reviews = [make_review("a", body=None), make_review(None, title="archived")]

    asyncio.run(table.append(reviews))
    headers, rows = asyncio.run(table.read_all())

    assert tuple(headers) == CANONICAL_HEADERS
    assert rows[0][CANONICAL_HEADERS.index("Body")] == NULL_MARKER
    assert [from_row(headers, row) for row in rows] == reviews


def test_nulls_are_stored_as_sql_null(sqlite_engine: Engine) -> None:
    table = SqlAlchemyReviewTable(sqlite_engine)

    asyncio.run(table.append([make_review("a", body=None)]))

    with sqlite_engine.connect() as connection:
        body = connection.execute(select(table.table.c["Body"])).scalar_one()
    assert body is None


def test_sync_against_sql_table(sqlite_engine: Engine, acme: Customer) -> None:
    table = SqlAlchemyReviewTable(sqlite_engine)
    asyncio.run(table.append([make_review("a")]))
    source = FakeReviewSource(acme, Store.APPLE, [make_review("a"), make_review("b")])

    report = asyncio.run(sync_reviews([source], table))

    assert [review.review_id for review in report.new_reviews] == ["b"]
    _, rows = asyncio.run(table.read_all())
    assert len(rows) == 2
