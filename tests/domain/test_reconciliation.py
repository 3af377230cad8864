from __future__ import annotations

from datetime import UTC, datetime

from reviewsync.domain.reconciliation import (
    ExistingReviewIndex,
    build_existing_reviews,
    parse_review_date,
    reconcile,
)
from reviewsync.domain.review import Store
from tests.helpers.reviews import make_review


def test_reconcile_drops_known_identifiers() -> None:
    index = ExistingReviewIndex.from_reviews([make_review("a"), make_review("b")])
    candidates = [make_review("b"), make_review("c"), make_review("a"), make_review("d")]

    fresh = reconcile(candidates, index)

    assert [review.review_id for review in fresh] == ["c", "d"]


def test_reconcile_keeps_first_of_repeated_candidates() -> None:
    first = make_review("x", body="first")
    second = make_review("x", body="second")

    fresh = reconcile([first, second, make_review("y")], ExistingReviewIndex())

    assert fresh == [first, make_review("y")]


def test_reconcile_matches_anonymous_reviews_by_value() -> None:
    archived = make_review(None, body="Old review")
    index = ExistingReviewIndex.from_reviews([archived])
    other = make_review(None, body="Another one")

    fresh = reconcile([make_review(None, body="Old review"), other, other], index)

    assert fresh == [other]


def test_reconcile_treats_empty_identifier_as_absent() -> None:
    blank = make_review("", body="no id")
    index = ExistingReviewIndex.from_reviews([blank])

    assert reconcile([make_review("", body="no id")], index) == []
    assert reconcile([make_review("", body="changed")], index) == [
        make_review("", body="changed")
    ]


def test_reconcile_is_idempotent() -> None:
    candidates = [make_review("a"), make_review(None, body="x"), make_review("b")]
    fresh = reconcile(candidates, ExistingReviewIndex())

    index = ExistingReviewIndex.from_reviews(fresh)

    assert reconcile(candidates, index) == []


def test_reconcile_empty_batch() -> None:
    assert reconcile([], ExistingReviewIndex.from_reviews([make_review("a")])) == []


def test_existing_reviews_are_partitioned_by_customer_and_store() -> None:
    existing = build_existing_reviews(
        [
            make_review("a", customer="Acme", store=Store.APPLE),
            make_review("a", customer="Acme", store=Store.GOOGLE, date="2024-05-01T00:00:00Z"),
            make_review("b", customer="Globex", store=Store.APPLE),
        ]
    )

    acme_google = existing.for_pair("Acme", Store.GOOGLE.value)

    assert existing.total == 3
    assert acme_google.review_ids == frozenset({"a"})
    assert acme_google.latest_date == datetime(2024, 5, 1, tzinfo=UTC)
    assert existing.for_pair("Globex", Store.GOOGLE.value).is_empty
    # same id in another partition is not a duplicate
    assert reconcile([make_review("a", customer="Globex")], existing.for_pair("Globex", "Apple"))


def test_latest_date_ignores_unparsable_dates() -> None:
    index = ExistingReviewIndex.from_reviews(
        [
            make_review("a", date="2024-01-01T00:00:00Z"),
            make_review("b", date="not a date"),
            make_review("c", date=None),
        ]
    )

    assert index.latest_date == datetime(2024, 1, 1, tzinfo=UTC)


def test_parse_review_date_normalizes_to_utc() -> None:
    assert parse_review_date("2023-12-07T10:15:00-08:00") == datetime(
        2023, 12, 7, 18, 15, tzinfo=UTC
    )
    assert parse_review_date("2023-12-07T10:15:00Z") == datetime(2023, 12, 7, 10, 15, tzinfo=UTC)
    assert parse_review_date("") is None
    assert parse_review_date("<null>") is None
