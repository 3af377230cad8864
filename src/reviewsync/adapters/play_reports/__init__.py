"""Archived Google Play review reports stored in Cloud Storage."""

from __future__ import annotations

from .client import ReviewReportsReader, split_bucket_uri
from .schema import ArchivedReportReview, ArchiveFormatError, parse_report
from .translator import review_id_from_link, translate_report_review

__all__ = [
    "ArchiveFormatError",
    "ArchivedReportReview",
    "ReviewReportsReader",
    "parse_report",
    "review_id_from_link",
    "split_bucket_uri",
    "translate_report_review",
]
