from __future__ import annotations

import asyncio

import httpx
import pytest

from reviewsync.adapters.play_reports import (
    ArchiveFormatError,
    ReviewReportsReader,
    parse_report,
    review_id_from_link,
    split_bucket_uri,
    translate_report_review,
)
from reviewsync.domain.review import Customer
from tests.helpers.http import FakeGoogleCredentials, make_client_factory

HEADER = (
    "Package Name,App Version Code,App Version Name,Reviewer Language,Device,"
    "Review Submit Date and Time,Review Submit Millis Since Epoch,"
    "Review Last Update Date and Time,Review Last Update Millis Since Epoch,Star Rating,"
    "Review Title,Review Text,Developer Reply Date and Time,"
    "Developer Reply Millis Since Epoch,Developer Reply Text,Review Link"
)
ROW = (
    'com.acme,42,1.2,en,walleye,2023-01-02T10:00:00Z,1672653600000,,,4,,"Works, mostly",'
    "2023-01-03T09:00:00Z,1672736400000,Thanks!,"
    "https://play.google.com/console/review-details?reviewId=gp-77"
)


def test_parse_report_reads_rows_and_blanks() -> None:
    (review,) = parse_report(f"{HEADER}\n{ROW}\n\n")

    assert review.package_name == "com.acme"
    assert review.review_text == "Works, mostly"
    assert review.review_title is None
    assert review.review_last_update_date_and_time is None
    assert review.developer_reply_text == "Thanks!"


def test_parse_report_requires_headers() -> None:
    with pytest.raises(ArchiveFormatError, match="Headers missing"):
        parse_report("", name="gs://bucket/reviews_com.acme_202301.csv")


def test_translate_report_review_recovers_review_id(acme: Customer) -> None:
    (review,) = parse_report(f"{HEADER}\n{ROW}\n")

    canonical = translate_report_review(review, customer=acme)

    assert canonical.customer == "Acme"
    assert canonical.store == "Google"
    assert canonical.app_id == "com.acme"
    assert canonical.review_id == "gp-77"
    assert canonical.date == "2023-01-02T10:00:00Z"
    assert canonical.rating == "4"
    assert canonical.device == "walleye"
    assert canonical.reply_date == "2023-01-03T09:00:00Z"
    assert canonical.author is None
    assert canonical.review_link is not None


def test_review_id_from_link_edge_cases() -> None:
    assert review_id_from_link(None) is None
    assert review_id_from_link("") is None
    assert review_id_from_link("https://play.google.com/console/review-details") is None
    assert review_id_from_link("https://play.google.com/x?reviewId=") is None


def test_split_bucket_uri() -> None:
    assert split_bucket_uri("gs://pubsite_prod/reviews") == ("pubsite_prod", "reviews")
    assert split_bucket_uri("gs://pubsite_prod") == ("pubsite_prod", "")
    with pytest.raises(ValueError, match="Not a Cloud Storage URI"):
        split_bucket_uri("s3://bucket/reviews")


def test_reader_lists_and_decodes_reports_of_one_app() -> None:
    requests: list[httpx.Request] = []
    report = f"{HEADER}\n{ROW}\n".encode("utf-16")

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.params.get("alt") == "media":
            return httpx.Response(200, content=report)
        if request.url.params.get("pageToken") is None:
            return httpx.Response(
                200,
                json={
                    "kind": "storage#objects",
                    "items": [
                        {"name": "reviews/reviews_com.acme_202301.csv"},
                        {"name": "reviews/reviews_com.other_202301.csv"},
                    ],
                    "nextPageToken": "p2",
                },
            )
        return httpx.Response(
            200,
            json={
                "kind": "storage#objects",
                "items": [{"name": "reviews/reviews_com.acme_202302.csv"}],
            },
        )

    reader = ReviewReportsReader(
        FakeGoogleCredentials(),  # type: ignore[arg-type]
        client_factory=make_client_factory(handler),
    )

    texts = asyncio.run(reader.list_archive_objects("gs://pubsite_prod/reviews", "com.acme"))

    assert len(texts) == 2
    assert all(text.startswith("Package Name") for text in texts)
    listing = requests[0]
    assert listing.url.path.endswith("/b/pubsite_prod/o")
    assert listing.url.params["prefix"] == "reviews"
    downloads = [request for request in requests if request.url.params.get("alt") == "media"]
    assert len(downloads) == 2


def test_reader_rejects_undecodable_report() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("alt") == "media":
            return httpx.Response(200, content=b"\xff\xfe\x00")
        return httpx.Response(200, json={"items": [{"name": "reviews_com.acme_1.csv"}]})

    reader = ReviewReportsReader(
        FakeGoogleCredentials(),  # type: ignore[arg-type]
        client_factory=make_client_factory(handler),
    )

    with pytest.raises(ArchiveFormatError):
        asyncio.run(reader.list_archive_objects("gs://bucket", "com.acme"))
