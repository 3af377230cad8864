"""Pydantic models for the Google Play Developer API reviews resource.

https://developers.google.com/android-publisher/api-ref/rest/v3/reviews
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    field_validator,
    model_validator,
)


class GooglePlayBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Timestamp(GooglePlayBaseModel):
    seconds: int
    nanos: int = 0

    @field_validator("seconds", mode="before")
    @classmethod
    def _parse_seconds(cls, value: int | str) -> int:
        return int(value)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.seconds, self.nanos)

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds, tz=UTC).replace(
            microsecond=self.nanos // 1000
        )

    def isoformat(self) -> str:
        return self.to_datetime().isoformat().replace("+00:00", "Z")


class DeviceMetadata(GooglePlayBaseModel):
    product_name: str | None = Field(default=None, alias="productName")
    manufacturer: str | None = None
    device_class: str | None = Field(default=None, alias="deviceClass")
    screen_width_px: int | None = Field(default=None, alias="screenWidthPx")
    screen_height_px: int | None = Field(default=None, alias="screenHeightPx")
    native_platform: str | None = Field(default=None, alias="nativePlatform")
    screen_density_dpi: int | None = Field(default=None, alias="screenDensityDpi")
    gl_es_version: int | None = Field(default=None, alias="glEsVersion")
    cpu_model: str | None = Field(default=None, alias="cpuModel")
    cpu_make: str | None = Field(default=None, alias="cpuMake")
    ram_mb: int | None = Field(default=None, alias="ramMb")


class UserComment(GooglePlayBaseModel):
    text: str | None = None
    last_modified: Timestamp = Field(alias="lastModified")
    star_rating: int | None = Field(default=None, alias="starRating")
    reviewer_language: str | None = Field(default=None, alias="reviewerLanguage")
    device: str | None = None
    android_os_version: int | None = Field(default=None, alias="androidOsVersion")
    app_version_code: int | None = Field(default=None, alias="appVersionCode")
    app_version_name: str | None = Field(default=None, alias="appVersionName")
    thumbs_up_count: int | None = Field(default=None, alias="thumbsUpCount")
    thumbs_down_count: int | None = Field(default=None, alias="thumbsDownCount")
    device_metadata: DeviceMetadata | None = Field(default=None, alias="deviceMetadata")
    original_text: str | None = Field(default=None, alias="originalText")


class DeveloperComment(GooglePlayBaseModel):
    text: str | None = None
    last_modified: Timestamp = Field(alias="lastModified")


class Comment(GooglePlayBaseModel):
    """Either a user comment or a developer reply; only one of the two is set."""

    user_comment: UserComment | None = Field(default=None, alias="userComment")
    developer_comment: DeveloperComment | None = Field(default=None, alias="developerComment")
    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_raw(cls, data: Any, handler: ModelWrapValidatorHandler[Comment]) -> Comment:
        comment = handler(data)
        if isinstance(data, dict):
            comment._raw = dict(data)  # pyright: ignore[reportPrivateUsage]
        return comment

    @property
    def raw(self) -> dict[str, Any]:
        """The comment exactly as the API returned it."""

        return self._raw


class Review(GooglePlayBaseModel):
    review_id: str = Field(alias="reviewId")
    author_name: str | None = Field(default=None, alias="authorName")
    comments: list[Comment] = Field(default_factory=list["Comment"])


class TokenPagination(GooglePlayBaseModel):
    next_page_token: str | None = Field(default=None, alias="nextPageToken")
    previous_page_token: str | None = Field(default=None, alias="previousPageToken")


class PageInfo(GooglePlayBaseModel):
    total_results: int | None = Field(default=None, alias="totalResults")
    result_per_page: int | None = Field(default=None, alias="resultPerPage")
    start_index: int | None = Field(default=None, alias="startIndex")


class ReviewsListResponse(GooglePlayBaseModel):
    """An empty body (``{}``) is a valid response for an app without recent reviews."""

    reviews: list[Review] = Field(default_factory=list["Review"])
    token_pagination: TokenPagination | None = Field(default=None, alias="tokenPagination")
    page_info: PageInfo | None = Field(default=None, alias="pageInfo")

    @property
    def next_page_token(self) -> str | None:
        if self.token_pagination is None:
            return None
        return self.token_pagination.next_page_token or None


class ErrorDetail(GooglePlayBaseModel):
    code: int
    message: str
    status: str | None = None


class ErrorResponse(GooglePlayBaseModel):
    error: ErrorDetail
