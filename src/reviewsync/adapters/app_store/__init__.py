"""Public interface for the App Store adapter."""

from __future__ import annotations

from .client import AppStoreAPIError, AppStoreClient
from .credentials import AppStoreCredentials
from .fetcher import AppStoreReviewSource, continue_until_known
from .schema import CustomerReview, CustomerReviewsResponse
from .translator import translate_customer_review

__all__ = [
    "AppStoreAPIError",
    "AppStoreClient",
    "AppStoreCredentials",
    "AppStoreReviewSource",
    "CustomerReview",
    "CustomerReviewsResponse",
    "continue_until_known",
    "translate_customer_review",
]
