"""Detection of reviews that are not yet persisted.

The existing rows are indexed once per run, partitioned by (customer, store). Reviews that
carry an identifier are matched by identifier; archived reviews without one are matched by
their full value.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .review import CanonicalReview

log = getLogger(__name__)

type PartitionKey = tuple[str | None, str | None]


def parse_review_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 review date, returning ``None`` for absent or malformed values."""

    if not value:
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class ExistingReviewIndex:
    """Known reviews of one (customer, store) pair."""

    review_ids: frozenset[str] = field(default_factory=frozenset)
    anonymous_reviews: frozenset[CanonicalReview] = field(default_factory=frozenset)
    latest_date: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.review_ids and not self.anonymous_reviews

    @classmethod
    def from_reviews(cls, reviews: Iterable[CanonicalReview]) -> ExistingReviewIndex:
        review_ids: set[str] = set()
        anonymous: set[CanonicalReview] = set()
        latest: datetime | None = None
        for review in reviews:
            if review.review_id:
                review_ids.add(review.review_id)
            else:
                anonymous.add(review)
            date = parse_review_date(review.date)
            if date is not None and (latest is None or date > latest):
                latest = date
        return cls(
            review_ids=frozenset(review_ids),
            anonymous_reviews=frozenset(anonymous),
            latest_date=latest,
        )


_EMPTY_INDEX = ExistingReviewIndex()


@dataclass(frozen=True, slots=True)
class ExistingReviews:
    """Read-only snapshot of the persisted reviews, partitioned by (customer, store)."""

    partitions: dict[PartitionKey, ExistingReviewIndex] = field(default_factory=dict)
    total: int = 0

    def for_pair(self, customer: str, store: str) -> ExistingReviewIndex:
        return self.partitions.get((customer, store), _EMPTY_INDEX)


def build_existing_reviews(reviews: Sequence[CanonicalReview]) -> ExistingReviews:
    grouped: defaultdict[PartitionKey, list[CanonicalReview]] = defaultdict(list)
    for review in reviews:
        grouped[(review.customer, review.store)].append(review)
    partitions = {key: ExistingReviewIndex.from_reviews(group) for key, group in grouped.items()}
    return ExistingReviews(partitions=partitions, total=len(reviews))


def reconcile(
    candidates: Iterable[CanonicalReview],
    index: ExistingReviewIndex,
) -> list[CanonicalReview]:
    """Return the candidates that are genuinely new, in input order.

    A candidate is dropped when its identifier is already known, when it repeats an earlier
    candidate's identifier, or, for candidates without an identifier, when an equal review
    is already known or appeared earlier in the batch.
    """

    seen_ids: set[str] = set()
    seen_anonymous: set[CanonicalReview] = set()
    fresh: list[CanonicalReview] = []
    for candidate in candidates:
        review_id = candidate.review_id
        if review_id:
            if review_id in index.review_ids or review_id in seen_ids:
                continue
            seen_ids.add(review_id)
        else:
            if candidate in index.anonymous_reviews or candidate in seen_anonymous:
                continue
            seen_anonymous.add(candidate)
        fresh.append(candidate)
    return fresh
