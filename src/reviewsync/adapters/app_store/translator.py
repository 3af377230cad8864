"""Translate App Store Connect customer reviews into canonical reviews."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewsync.domain.review import CanonicalReview, Store

if TYPE_CHECKING:
    from reviewsync.domain.review import Customer

    from .schema import CustomerReview


def translate_customer_review(
    review: CustomerReview,
    *,
    customer: Customer,
    resource_id: str,
) -> CanonicalReview:
    attributes = review.attributes
    return CanonicalReview(
        customer=customer.name,
        store=Store.APPLE.value,
        app_id=resource_id,
        review_id=review.id,
        date=attributes.created_date.isoformat(),
        title=attributes.title,
        body=attributes.body,
        rating=None if attributes.rating is None else str(attributes.rating),
        author=attributes.reviewer_nickname,
        territory=attributes.territory,
    )
