"""Concurrent fetch, reconcile and persist of reviews for every configured source."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import PersistenceError, SourceFetchError, SyncUnitError
from .reconciliation import ExistingReviews, build_existing_reviews, reconcile
from .rows import from_row, missing_headers

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import ReviewSource, ReviewTable
    from .reconciliation import ExistingReviewIndex
    from .review import CanonicalReview, Customer, Store

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnitSuccess:
    customer: Customer
    store: Store
    new_reviews: list[CanonicalReview]
    fetched: int = 0


@dataclass(frozen=True, slots=True)
class UnitFailure:
    customer: Customer
    store: Store
    error: SyncUnitError


type SyncUnitResult = UnitSuccess | UnitFailure


@dataclass(slots=True)
class SyncReport:
    """Aggregated outcome of all units of a run, in launch order."""

    results: list[SyncUnitResult] = field(default_factory=list)

    @property
    def new_reviews(self) -> list[CanonicalReview]:
        return [
            review
            for result in self.results
            if isinstance(result, UnitSuccess)
            for review in result.new_reviews
        ]

    @property
    def failures(self) -> list[UnitFailure]:
        return [result for result in self.results if isinstance(result, UnitFailure)]

    def by_customer(self) -> dict[Customer, dict[Store, SyncUnitResult]]:
        grouped: dict[Customer, dict[Store, SyncUnitResult]] = {}
        for result in self.results:
            grouped.setdefault(result.customer, {})[result.store] = result
        return grouped


async def load_existing_reviews(table: ReviewTable) -> ExistingReviews:
    """Read the persisted rows once and index them per (customer, store)."""

    headers, rows = await table.read_all()
    if headers:
        missing = missing_headers(headers)
        if missing:
            log.warning(
                "Reviews table is missing headers %s: these values cannot be read back",
                [header.value for header in missing],
            )
    reviews = [from_row(headers, row) for row in rows]
    log.info("%s reviews loaded from reviews table", len(reviews))
    return build_existing_reviews(reviews)


async def run_unit(
    source: ReviewSource,
    existing: ExistingReviews,
    table: ReviewTable,
) -> SyncUnitResult:
    """Fetch, reconcile and persist one unit; failures are returned, never raised."""

    customer, store = source.customer, source.store
    index = existing.for_pair(customer.name, store.value)
    log.info("Downloading %s store reviews for customer %s", store, customer)
    try:
        return await _sync_source(source, index, table)
    except SyncUnitError as exc:
        log.exception("Sync of %s store reviews for customer %s failed", store, customer)
        return UnitFailure(customer=customer, store=store, error=exc)
    except Exception as exc:
        log.exception("Unexpected error syncing %s store reviews for %s", store, customer)
        error = SyncUnitError(f"Unexpected error: {exc}")
        error.__cause__ = exc
        return UnitFailure(customer=customer, store=store, error=error)


async def _sync_source(
    source: ReviewSource,
    index: ExistingReviewIndex,
    table: ReviewTable,
) -> UnitSuccess:
    customer, store = source.customer, source.store
    try:
        candidates = await source.fetch_reviews(index)
    except Exception as exc:
        raise SourceFetchError(
            f"Failed to fetch {store} store reviews for {customer}: {exc}"
        ) from exc

    new_reviews = reconcile(candidates, index)
    log.info(
        "Found %s new %s store reviews for customer %s (%s fetched)",
        len(new_reviews),
        store,
        customer,
        len(candidates),
    )

    if new_reviews:
        try:
            await table.append(new_reviews)
        except Exception as exc:
            raise PersistenceError(
                f"Failed to write {len(new_reviews)} {store} store reviews for {customer}: {exc}"
            ) from exc
        log.info(
            "Wrote %s store reviews for %s: %s",
            store,
            customer,
            [review.review_id for review in new_reviews],
        )

    return UnitSuccess(
        customer=customer,
        store=store,
        new_reviews=new_reviews,
        fetched=len(candidates),
    )


async def sync_reviews(
    sources: Sequence[ReviewSource],
    table: ReviewTable,
    existing: ExistingReviews | None = None,
) -> SyncReport:
    """Run one unit per source concurrently and aggregate their results.

    ``existing`` is loaded from ``table`` when not given. Errors while loading it are not
    isolated and propagate to the caller.
    """

    snapshot = existing if existing is not None else await load_existing_reviews(table)
    results = await asyncio.gather(*(run_unit(source, snapshot, table) for source in sources))
    report = SyncReport(results=list(results))
    log.info(
        "Sync finished: %s units, %s new reviews, %s failures",
        len(report.results),
        len(report.new_reviews),
        len(report.failures),
    )
    return report
