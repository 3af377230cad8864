"""Slack Block Kit report of a sync run."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from reviewsync.domain.reconciliation import parse_review_date
from reviewsync.domain.review import Store
from reviewsync.domain.sync import UnitFailure, UnitSuccess

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from reviewsync.domain.review import CanonicalReview, Customer
    from reviewsync.domain.sync import SyncReport, SyncUnitResult

type Block = dict[str, object]

STORE_LABELS: Final[dict[Store, str]] = {
    Store.APPLE: "Apple App Store",
    Store.GOOGLE: "Google Play Store",
}
LATEST_REVIEWS_SHOWN: Final[int] = 3
_DIVIDER: Final[Block] = {"type": "divider"}


@dataclass(frozen=True, slots=True)
class Stats:
    count: int
    # NaN when no review has an integer rating
    average: float


def compute_stats(reviews: Sequence[CanonicalReview]) -> Stats:
    ratings: list[int] = []
    for review in reviews:
        try:
            ratings.append(int(review.rating or ""))
        except ValueError:
            continue
    average = sum(ratings) / len(ratings) if ratings else math.nan
    return Stats(count=len(reviews), average=average)


def to_rating_stars(value: int | float | str | None) -> str:
    """Render a 0-5 rating as filled and empty stars; unknown ratings render as ``""``."""

    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        value = round(value)
    if value is None:
        return ""
    stars = max(0, min(5, value))
    return "★" * stars + "☆" * (5 - stars)


def _average_line(label: str, stats: Stats) -> str:
    return f"{label}: {to_rating_stars(stats.average)} ({stats.average:.2f})"


def _section(text: str) -> Block:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _format_run_time(now: datetime) -> str:
    now = now.astimezone(UTC)
    return f"{now:%B} {now.day}, {now.year} at {now:%H:%M}"


def _summary(stats: Stats | None, sheet_url: str, now: datetime) -> Block:
    if stats is not None:
        message = "I have found new reviews"
    else:
        message = "Errors found while fetching reviews"
    processed = stats.count if stats else 0
    lines = [
        f"*Beep boop 🤖 {message}* (last run on {_format_run_time(now)})",
        "",
        f"⭐ Processed *{processed} reviews* to the <{sheet_url}|App Reviews sheet>",
    ]
    if stats is not None:
        lines.append(_average_line("Average rating over all new reviews", stats))
    return _section("\n".join(lines))


def _by_recency(reviews: Iterable[CanonicalReview]) -> list[CanonicalReview]:
    def key(review: CanonicalReview) -> tuple[bool, datetime]:
        parsed = parse_review_date(review.date)
        return parsed is not None, parsed or datetime.min.replace(tzinfo=UTC)

    return sorted(reviews, key=key, reverse=True)


def _review_blocks(review: CanonicalReview) -> Block:
    body = (review.body or "").replace("\n", "\n> ")
    return _section(
        "\n".join(
            [
                f"*Date:* {review.date}",
                f"*Rating:* {to_rating_stars(review.rating)}",
                f"*Author:* {review.author}",
                f"*Review ID:* {review.review_id}",
                f"*Title:* {review.title}",
                f"> {body}",
            ]
        )
    )


def _store_blocks(store: Store, result: SyncUnitResult) -> list[Block]:
    label = STORE_LABELS[store]
    if isinstance(result, UnitFailure):
        return [
            _section(
                f"🛑 Encountered the following error while fetching reviews on {label}:\n"
                f"```{result.error}```"
            )
        ]
    if not result.new_reviews:
        return []

    recent = _by_recency(result.new_reviews)
    dates = [d.date() for d in (parse_review_date(review.date) for review in recent) if d]
    latest = [review for review in recent if review.body][:LATEST_REVIEWS_SHOWN]
    stats = compute_stats(recent)

    lines = [f"🛍️ Found *{stats.count}* reviews on *{label}*"]
    if dates:
        lines.append(f"Period: {min(dates)} to {max(dates)}")
    lines.append(_average_line("Average rating of imported reviews for this platform", stats))
    if latest:
        lines.append(f"Showing {len(latest)} latest reviews with comments:")

    blocks = [_section("\n".join(lines))]
    for review in latest:
        blocks.append(_DIVIDER)
        blocks.append(_review_blocks(review))
    return blocks


def _customer_blocks(customer: Customer, results: dict[Store, SyncUnitResult]) -> list[Block]:
    reviews = [
        review
        for result in results.values()
        if isinstance(result, UnitSuccess)
        for review in result.new_reviews
    ]
    has_failure = any(isinstance(result, UnitFailure) for result in results.values())
    if not reviews and not has_failure:
        return []

    text = f"📱 *{customer.name}*"
    if reviews:
        text += "\n" + _average_line(
            "Average rating of imported reviews for this customer", compute_stats(reviews)
        )
    blocks: list[Block] = [_DIVIDER, _section(text)]
    for store, result in results.items():
        blocks.extend(_store_blocks(store, result))
    return blocks


def build_report_payload(
    report: SyncReport,
    *,
    sheet_url: str,
    now: datetime | None = None,
) -> dict[str, object] | None:
    """Build the webhook payload, or ``None`` when there is nothing to report."""

    new_reviews = report.new_reviews
    if not new_reviews and not report.failures:
        return None

    stats = compute_stats(new_reviews) if new_reviews else None
    blocks: list[Block] = [_summary(stats, sheet_url, now or datetime.now(UTC))]
    for customer, results in report.by_customer().items():
        blocks.extend(_customer_blocks(customer, results))
    return {"blocks": blocks}


def error_payload(error: BaseException) -> dict[str, object]:
    return {"text": f"🤖⚠️ The app reviews tool encountered an error:\n{error}"}
