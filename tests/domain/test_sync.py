from __future__ import annotations

import asyncio

import pytest

from reviewsync.domain.errors import PersistenceError, SourceFetchError, SyncUnitError
from reviewsync.domain.review import CANONICAL_HEADERS, Customer, Store
from reviewsync.domain.sync import UnitFailure, UnitSuccess, load_existing_reviews, sync_reviews
from tests.helpers.reviews import FakeReviewSource, InMemoryReviewTable, make_review


def test_sync_appends_only_new_reviews(acme: Customer) -> None:
    table = InMemoryReviewTable.with_reviews([make_review("a"), make_review("b")])
    source = FakeReviewSource(
        acme, Store.APPLE, [make_review("b"), make_review("c"), make_review("c")]
    )

    report = asyncio.run(sync_reviews([source], table))

    assert [review.review_id for review in report.new_reviews] == ["c"]
    assert [review.review_id for review in table.reviews()] == ["a", "b", "c"]
    assert report.failures == []


def test_sync_passes_partitioned_index_to_sources(acme: Customer, globex: Customer) -> None:
    table = InMemoryReviewTable.with_reviews(
        [
            make_review("a", customer="Acme", store=Store.APPLE),
            make_review("g", customer="Acme", store=Store.GOOGLE),
        ]
    )
    apple = FakeReviewSource(acme, Store.APPLE)
    other = FakeReviewSource(globex, Store.APPLE)

    asyncio.run(sync_reviews([apple, other], table))

    assert apple.seen_indexes[0].review_ids == frozenset({"a"})
    assert other.seen_indexes[0].is_empty


def test_sync_isolates_failing_units(acme: Customer, globex: Customer) -> None:
    table = InMemoryReviewTable()
    failing = FakeReviewSource(acme, Store.GOOGLE, error=OSError("network down"))
    healthy = FakeReviewSource(
        globex, Store.APPLE, [make_review("n", customer="Globex")]
    )

    report = asyncio.run(sync_reviews([failing, healthy], table))

    first, second = report.results
    assert isinstance(first, UnitFailure)
    assert isinstance(first.error, SourceFetchError)
    assert isinstance(first.error.__cause__, OSError)
    assert isinstance(second, UnitSuccess)
    assert [review.review_id for review in table.reviews()] == ["n"]


def test_sync_reports_persistence_errors(acme: Customer) -> None:
    table = InMemoryReviewTable(fail_on_append=RuntimeError("quota exceeded"))
    source = FakeReviewSource(acme, Store.APPLE, [make_review("new")])

    report = asyncio.run(sync_reviews([source], table))

    (failure,) = report.failures
    assert isinstance(failure.error, PersistenceError)
    assert "quota exceeded" in str(failure.error)


def test_sync_skips_append_without_new_reviews(acme: Customer) -> None:
    table = InMemoryReviewTable.with_reviews([make_review("a")])
    source = FakeReviewSource(acme, Store.APPLE, [make_review("a")])

    report = asyncio.run(sync_reviews([source], table))

    assert table.appends == 0
    (result,) = report.results
    assert isinstance(result, UnitSuccess)
    assert result.new_reviews == []
    assert result.fetched == 1


def test_sync_with_no_sources_is_empty() -> None:
    report = asyncio.run(sync_reviews([], InMemoryReviewTable()))

    assert report.results == []
    assert report.new_reviews == []


def test_report_groups_results_by_customer(acme: Customer, globex: Customer) -> None:
    table = InMemoryReviewTable()
    sources = [
        FakeReviewSource(acme, Store.APPLE),
        FakeReviewSource(acme, Store.GOOGLE),
        FakeReviewSource(globex, Store.GOOGLE, error=ValueError("bad payload")),
    ]

    report = asyncio.run(sync_reviews(sources, table))
    grouped = report.by_customer()

    assert list(grouped) == [acme, globex]
    assert list(grouped[acme]) == [Store.APPLE, Store.GOOGLE]
    assert isinstance(grouped[globex][Store.GOOGLE], UnitFailure)


def test_load_existing_reviews_errors_propagate() -> None:
    class BrokenTable(InMemoryReviewTable):
        async def read_all(self) -> tuple[list[str], list[list[str]]]:
            raise SyncUnitError("cannot read")

    with pytest.raises(SyncUnitError):
        asyncio.run(load_existing_reviews(BrokenTable()))


def test_load_existing_reviews_tolerates_missing_headers(caplog: pytest.LogCaptureFixture) -> None:
    table = InMemoryReviewTable(
        headers=["Customer", "Store", "ReviewId"],
        rows=[["Acme", "Apple", "x"]],
    )

    existing = asyncio.run(load_existing_reviews(table))

    assert existing.for_pair("Acme", "Apple").review_ids == frozenset({"x"})
    assert "missing headers" in caplog.text


def test_sync_into_empty_store(acme: Customer) -> None:
    table = InMemoryReviewTable(headers=[])
    source = FakeReviewSource(acme, Store.APPLE, [make_review("1"), make_review("2")])

    report = asyncio.run(sync_reviews([source], table))

    assert [review.review_id for review in report.new_reviews] == ["1", "2"]
    assert source.seen_indexes[0].is_empty
    headers, rows = asyncio.run(table.read_all())
    assert tuple(headers) == CANONICAL_HEADERS
    assert [row[CANONICAL_HEADERS.index("ReviewId")] for row in rows] == ["1", "2"]
