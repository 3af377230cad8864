"""Public interface for the Google Sheets adapter."""

from __future__ import annotations

from .client import SheetsAPIError, SheetsClient
from .schema import AppendValuesResponse, ValueRange
from .table import DEFAULT_REVIEWS_SHEET, SheetReviewTable, read_sheets_config

__all__ = [
    "DEFAULT_REVIEWS_SHEET",
    "AppendValuesResponse",
    "SheetReviewTable",
    "SheetsAPIError",
    "SheetsClient",
    "ValueRange",
    "read_sheets_config",
]
