"""App Store review source, paging newest first until the persisted history is reached."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reviewsync.domain.pagination import ContinuePredicate, Page, drain_pages
from reviewsync.domain.review import Store

from .translator import translate_customer_review

if TYPE_CHECKING:
    from datetime import datetime

    from reviewsync.domain.reconciliation import ExistingReviewIndex
    from reviewsync.domain.review import CanonicalReview, Customer

    from .client import AppStoreClient
    from .schema import CustomerReview

log = getLogger(__name__)


def continue_until_known(latest: datetime | None) -> ContinuePredicate[CustomerReview]:
    """Keep paging while the oldest review of a page is not older than ``latest``."""

    def should_continue(page: Page[CustomerReview]) -> bool:
        oldest = min((review.attributes.created_date for review in page.records), default=None)
        if oldest is None or latest is None:
            return True
        return oldest >= latest

    return should_continue


@dataclass(slots=True)
class AppStoreReviewSource:
    customer: Customer
    resource_id: str
    client: AppStoreClient
    store: Store = field(default=Store.APPLE, init=False)

    async def fetch_reviews(self, existing: ExistingReviewIndex) -> list[CanonicalReview]:
        async def fetch_page(next_link: str | None) -> Page[CustomerReview]:
            response = await self.client.list_customer_reviews(self.resource_id, next_link)
            return Page(records=response.data, next_token=response.links.next)

        reviews = await drain_pages(
            fetch_page,
            should_continue=continue_until_known(existing.latest_date),
        )
        log.info(
            "Fetched %s App Store reviews of app %s for customer %s",
            len(reviews),
            self.resource_id,
            self.customer,
        )
        return [
            translate_customer_review(review, customer=self.customer, resource_id=self.resource_id)
            for review in reviews
        ]
