"""Translate Google Play Developer API reviews into canonical reviews."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from reviewsync.domain.review import CanonicalReview, Store

if TYPE_CHECKING:
    from reviewsync.domain.review import Customer

    from .schema import Comment, DeveloperComment, Review, UserComment


def _text(value: object | None) -> str | None:
    return None if value is None else str(value)


def select_comments(
    comments: list[Comment],
) -> tuple[UserComment | None, DeveloperComment | None, list[Comment]]:
    """Pick the earliest user comment and earliest developer reply.

    Returns both selections and the comments that were not selected, in their original order.
    """

    review: UserComment | None = None
    reply: DeveloperComment | None = None
    for comment in comments:
        user_comment = comment.user_comment
        if user_comment is not None and (
            review is None or user_comment.last_modified.sort_key < review.last_modified.sort_key
        ):
            review = user_comment
        developer_comment = comment.developer_comment
        if developer_comment is not None and (
            reply is None or developer_comment.last_modified.sort_key < reply.last_modified.sort_key
        ):
            reply = developer_comment

    unselected = [
        comment
        for comment in comments
        if not (
            (review is not None and comment.user_comment is review)
            or (reply is not None and comment.developer_comment is reply)
        )
    ]
    return review, reply, unselected


def translate_review(review: Review, *, customer: Customer, package_name: str) -> CanonicalReview:
    user_comment, reply, unselected = select_comments(review.comments)
    metadata = user_comment.device_metadata if user_comment is not None else None

    misc = None
    if unselected:
        misc = json.dumps([comment.raw for comment in unselected])

    return CanonicalReview(
        customer=customer.name,
        store=Store.GOOGLE.value,
        app_id=package_name,
        review_id=review.review_id,
        date=user_comment.last_modified.isoformat() if user_comment else None,
        body=user_comment.text.strip() if user_comment and user_comment.text else None,
        rating=_text(user_comment.star_rating) if user_comment else None,
        author=review.author_name,
        territory=user_comment.reviewer_language if user_comment else None,
        device=user_comment.device if user_comment else None,
        thumbs_up_count=_text(user_comment.thumbs_up_count) if user_comment else None,
        thumbs_down_count=_text(user_comment.thumbs_down_count) if user_comment else None,
        android_os_version=_text(user_comment.android_os_version) if user_comment else None,
        app_version_code=_text(user_comment.app_version_code) if user_comment else None,
        app_version_name=user_comment.app_version_name if user_comment else None,
        device_product_name=metadata.product_name if metadata else None,
        device_manufacturer=metadata.manufacturer if metadata else None,
        device_class=metadata.device_class if metadata else None,
        screen_width_px=_text(metadata.screen_width_px) if metadata else None,
        screen_height_px=_text(metadata.screen_height_px) if metadata else None,
        native_platform=metadata.native_platform if metadata else None,
        screen_density_dpi=_text(metadata.screen_density_dpi) if metadata else None,
        gl_es_version=_text(metadata.gl_es_version) if metadata else None,
        cpu_model=metadata.cpu_model if metadata else None,
        cpu_make=metadata.cpu_make if metadata else None,
        ram_mb=_text(metadata.ram_mb) if metadata else None,
        reply_text=reply.text if reply else None,
        reply_date=reply.last_modified.isoformat() if reply else None,
        misc=misc,
    )
