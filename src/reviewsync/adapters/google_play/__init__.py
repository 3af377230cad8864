"""Public interface for the Google Play adapter."""

from __future__ import annotations

from .client import GooglePlayAPIError, GooglePlayClient
from .fetcher import GooglePlayReviewSource
from .schema import Review, ReviewsListResponse
from .translator import select_comments, translate_review

__all__ = [
    "GooglePlayAPIError",
    "GooglePlayClient",
    "GooglePlayReviewSource",
    "Review",
    "ReviewsListResponse",
    "select_comments",
    "translate_review",
]
