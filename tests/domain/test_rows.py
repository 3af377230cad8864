from __future__ import annotations

from reviewsync.domain.review import CANONICAL_HEADERS, CanonicalReview, ReviewField
from reviewsync.domain.rows import NULL_MARKER, from_row, missing_headers, to_row
from tests.helpers.reviews import make_review


def test_canonical_headers_order() -> None:
    assert CANONICAL_HEADERS[:5] == ("Customer", "Store", "AppId", "ReviewId", "Date")
    assert CANONICAL_HEADERS[-1] == "ReviewLink"
    assert len(CANONICAL_HEADERS) == 31


def test_to_row_follows_table_header_order() -> None:
    review = make_review("r-9", rating="4", body=None)
    headers = ["Rating", "Notes", "ReviewId", "Body"]

    assert to_row(review, headers) == ["4", "", "r-9", NULL_MARKER]


def test_from_row_decodes_null_marker_and_short_rows() -> None:
    headers = ["ReviewId", "Body", "Notes", "Rating", "Title"]

    review = from_row(headers, ["r-1", NULL_MARKER, "ignored", "3"])

    assert review.review_id == "r-1"
    assert review.body is None
    assert review.rating == "3"
    assert review.title is None


def test_row_round_trip_preserves_every_field() -> None:
    review = CanonicalReview.from_mapping(
        {
            field: (None if index % 3 == 0 else f"v{index}")
            for index, field in enumerate(ReviewField)
        }
    )

    assert from_row(CANONICAL_HEADERS, to_row(review, CANONICAL_HEADERS)) == review


def test_missing_headers_lists_fields_without_column() -> None:
    headers = [header for header in CANONICAL_HEADERS if header not in {"Misc", "Device"}]

    assert missing_headers(headers) == [ReviewField.DEVICE, ReviewField.MISC]
    assert missing_headers(CANONICAL_HEADERS) == []


def test_review_identity_falls_back_to_value() -> None:
    anonymous = make_review(None)

    assert make_review("abc").identity == "abc"
    assert anonymous.identity == make_review(None)
    assert hash(anonymous) == hash(make_review(None))
