"""Rows of the Google Play review reports exported to Cloud Storage."""

from __future__ import annotations

import csv
import io

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArchiveFormatError(RuntimeError):
    """Raised when an archived reviews report cannot be parsed."""


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        return value or None
    return value


class ArchivedReportReview(BaseModel):
    """One CSV row; every column is optional and kept as text."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    package_name: str | None = Field(default=None, alias="Package Name")
    app_version_code: str | None = Field(default=None, alias="App Version Code")
    app_version_name: str | None = Field(default=None, alias="App Version Name")
    reviewer_language: str | None = Field(default=None, alias="Reviewer Language")
    device: str | None = Field(default=None, alias="Device")
    review_submit_date_and_time: str | None = Field(
        default=None, alias="Review Submit Date and Time"
    )
    review_submit_millis_since_epoch: str | None = Field(
        default=None, alias="Review Submit Millis Since Epoch"
    )
    review_last_update_date_and_time: str | None = Field(
        default=None, alias="Review Last Update Date and Time"
    )
    review_last_update_millis_since_epoch: str | None = Field(
        default=None, alias="Review Last Update Millis Since Epoch"
    )
    star_rating: str | None = Field(default=None, alias="Star Rating")
    review_title: str | None = Field(default=None, alias="Review Title")
    review_text: str | None = Field(default=None, alias="Review Text")
    developer_reply_date_and_time: str | None = Field(
        default=None, alias="Developer Reply Date and Time"
    )
    developer_reply_millis_since_epoch: str | None = Field(
        default=None, alias="Developer Reply Millis Since Epoch"
    )
    developer_reply_text: str | None = Field(default=None, alias="Developer Reply Text")
    review_link: str | None = Field(default=None, alias="Review Link")

    _normalize_blanks = field_validator("*", mode="before")(_blank_to_none)


def parse_report(text: str, *, name: str = "<report>") -> list[ArchivedReportReview]:
    """Parse the CSV text of one report; the first record must be the header row."""

    reader = csv.reader(io.StringIO(text))
    headers = next(reader, None)
    if not headers:
        raise ArchiveFormatError(f"Headers missing in reviews report CSV {name}")
    headers = [header.strip() for header in headers]

    reviews: list[ArchivedReportReview] = []
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        reviews.append(ArchivedReportReview.model_validate(dict(zip(headers, row, strict=False))))
    return reviews
