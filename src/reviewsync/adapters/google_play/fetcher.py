"""Google Play review source: recent reviews plus a one-time archive backfill."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reviewsync.adapters.play_reports import parse_report, translate_report_review
from reviewsync.domain.pagination import Page, drain_pages
from reviewsync.domain.review import Store

from .translator import translate_review

if TYPE_CHECKING:
    from reviewsync.domain.ports import ArchiveReader
    from reviewsync.domain.reconciliation import ExistingReviewIndex
    from reviewsync.domain.review import CanonicalReview, Customer

    from .client import GooglePlayClient
    from .schema import Review

log = getLogger(__name__)


@dataclass(slots=True)
class GooglePlayReviewSource:
    """Reviews of one Android app.

    Archived reports are only imported while no review of the app is persisted yet: they
    cover the history the API cannot return. Both parts go through the same reconciliation,
    so reviews present in both are kept once.
    """

    customer: Customer
    package_name: str
    client: GooglePlayClient
    archive: ArchiveReader | None = None
    reports_bucket_uri: str | None = None
    store: Store = field(default=Store.GOOGLE, init=False)

    async def fetch_reviews(self, existing: ExistingReviewIndex) -> list[CanonicalReview]:
        archived = await self._fetch_archived(existing)

        async def fetch_page(token: str | None) -> Page[Review]:
            response = await self.client.list_reviews(self.package_name, token)
            return Page(records=response.reviews, next_token=response.next_page_token)

        # no bounding predicate: the API only serves the last week of reviews
        live = await drain_pages(fetch_page)
        log.info(
            "Fetched %s recent Google Play reviews for customer %s",
            len(live),
            self.customer,
        )
        return archived + [
            translate_review(review, customer=self.customer, package_name=self.package_name)
            for review in live
        ]

    async def _fetch_archived(self, existing: ExistingReviewIndex) -> list[CanonicalReview]:
        if not existing.is_empty:
            return []
        log.info("No Google Play Store reviews found for customer %s", self.customer)
        if self.reports_bucket_uri is None or self.archive is None:
            log.info(
                "No Cloud Storage reviews reports bucket URI specified for %s. "
                "Previous reviews will not be imported",
                self.customer,
            )
            return []

        log.info("Retrieving older reviews from Cloud Storage bucket %s", self.reports_bucket_uri)
        texts = await self.archive.list_archive_objects(self.reports_bucket_uri, self.package_name)
        reviews = [
            translate_report_review(row, customer=self.customer)
            for index, text in enumerate(texts)
            for row in parse_report(text, name=f"{self.reports_bucket_uri}#{index}")
        ]
        log.info("Found %s reviews in the archived reviews reports", len(reviews))
        return reviews
