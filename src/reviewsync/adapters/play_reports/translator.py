"""Translate archived review report rows into canonical reviews."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from reviewsync.domain.review import CanonicalReview, Store

if TYPE_CHECKING:
    from reviewsync.domain.review import Customer

    from .schema import ArchivedReportReview


def review_id_from_link(link: str | None) -> str | None:
    """Extract the ``reviewId`` query parameter of a Play Console review link."""

    if not link:
        return None
    try:
        value = httpx.URL(link).params.get("reviewId")
    except httpx.InvalidURL:
        return None
    return value or None


def translate_report_review(review: ArchivedReportReview, *, customer: Customer) -> CanonicalReview:
    return CanonicalReview(
        customer=customer.name,
        store=Store.GOOGLE.value,
        app_id=review.package_name,
        review_id=review_id_from_link(review.review_link),
        date=review.review_submit_date_and_time,
        title=review.review_title,
        body=review.review_text,
        rating=review.star_rating,
        territory=review.reviewer_language,
        device=review.device,
        app_version_code=review.app_version_code,
        app_version_name=review.app_version_name,
        reply_text=review.developer_reply_text,
        reply_date=review.developer_reply_date_and_time,
        review_link=review.review_link,
    )
