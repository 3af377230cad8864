"""Canonical, source-agnostic review rows."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Final


class Store(StrEnum):
    """String representation of stores in the reviews table."""

    APPLE = "Apple"
    GOOGLE = "Google"


class ReviewField(StrEnum):
    """Header names of review rows, in canonical column order."""

    CUSTOMER = "Customer"
    STORE = "Store"
    APP_ID = "AppId"
    REVIEW_ID = "ReviewId"
    DATE = "Date"
    TITLE = "Title"
    BODY = "Body"
    RATING = "Rating"
    AUTHOR = "Author"
    TERRITORY = "Territory"
    DEVICE = "Device"
    THUMBS_UP_COUNT = "ThumbsUpCount"
    THUMBS_DOWN_COUNT = "ThumbsDownCount"
    ANDROID_OS_VERSION = "AndroidOsVersion"
    APP_VERSION_CODE = "AppVersionCode"
    APP_VERSION_NAME = "AppVersionName"
    DEVICE_PRODUCT_NAME = "DeviceProductName"
    DEVICE_MANUFACTURER = "DeviceManufacturer"
    DEVICE_CLASS = "DeviceClass"
    SCREEN_WIDTH_PX = "ScreenWidthPx"
    SCREEN_HEIGHT_PX = "ScreenHeightPx"
    NATIVE_PLATFORM = "NativePlatform"
    SCREEN_DENSITY_DPI = "ScreenDensityDpi"
    GL_ES_VERSION = "GlEsVersion"
    CPU_MODEL = "CpuModel"
    CPU_MAKE = "CpuMake"
    RAM_MB = "RamMb"
    REPLY_TEXT = "ReplyText"
    REPLY_DATE = "ReplyDate"
    MISC = "Misc"
    REVIEW_LINK = "ReviewLink"

    @property
    def attribute(self) -> str:
        """Name of the matching ``CanonicalReview`` attribute."""

        return self.name.lower()


CANONICAL_HEADERS: Final[tuple[str, ...]] = tuple(field.value for field in ReviewField)


@dataclass(frozen=True, slots=True)
class Customer:
    """A customer owning one app per store at most."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class CanonicalReview:
    """One normalized review.

    Every attribute corresponds to exactly one ``ReviewField``; ``None`` means the value is
    absent. Instances are immutable and compare by value, so they can be used as set members
    when reviews lack an identifier.
    """

    customer: str | None = None
    store: str | None = None
    app_id: str | None = None
    review_id: str | None = None
    date: str | None = None
    title: str | None = None
    body: str | None = None
    rating: str | None = None
    author: str | None = None
    territory: str | None = None
    device: str | None = None
    thumbs_up_count: str | None = None
    thumbs_down_count: str | None = None
    android_os_version: str | None = None
    app_version_code: str | None = None
    app_version_name: str | None = None
    device_product_name: str | None = None
    device_manufacturer: str | None = None
    device_class: str | None = None
    screen_width_px: str | None = None
    screen_height_px: str | None = None
    native_platform: str | None = None
    screen_density_dpi: str | None = None
    gl_es_version: str | None = None
    cpu_model: str | None = None
    cpu_make: str | None = None
    ram_mb: str | None = None
    reply_text: str | None = None
    reply_date: str | None = None
    misc: str | None = None
    review_link: str | None = None

    def __getitem__(self, field: ReviewField) -> str | None:
        return getattr(self, field.attribute)

    @classmethod
    def from_mapping(cls, values: Mapping[ReviewField, str | None]) -> CanonicalReview:
        return cls(**{field.attribute: value for field, value in values.items()})

    def as_mapping(self) -> dict[ReviewField, str | None]:
        return {field: self[field] for field in ReviewField}

    def non_null_fields(self) -> frozenset[ReviewField]:
        return frozenset(field for field in ReviewField if self[field] is not None)

    @property
    def identity(self) -> str | CanonicalReview:
        """Review id when present and non-empty, otherwise the whole review."""

        return self.review_id if self.review_id else self


def _check_fields() -> None:
    attributes = {field.name for field in fields(CanonicalReview)}
    expected = {field.attribute for field in ReviewField}
    if attributes != expected:
        raise RuntimeError(
            f"CanonicalReview attributes do not match ReviewField: {attributes ^ expected}"
        )


_check_fields()
