"""Minimal Pydantic models for the App Store Connect customer reviews API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field


class AppStoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CustomerReviewAttributes(AppStoreBaseModel):
    body: str | None = None
    created_date: datetime = Field(alias="createdDate")
    rating: int | None = None
    reviewer_nickname: str | None = Field(default=None, alias="reviewerNickname")
    title: str | None = None
    territory: str | None = None


class CustomerReview(AppStoreBaseModel):
    id: str
    type: str = "customerReviews"
    attributes: CustomerReviewAttributes


class PagedDocumentLinks(AppStoreBaseModel):
    self_link: str | None = Field(default=None, alias="self")
    first: str | None = None
    next: str | None = None


class Paging(AppStoreBaseModel):
    total: int | None = None
    limit: int | None = None


class PagingInformation(AppStoreBaseModel):
    paging: Paging | None = None


class CustomerReviewsResponse(AppStoreBaseModel):
    data: list[CustomerReview] = Field(default_factory=list["CustomerReview"])
    links: PagedDocumentLinks = Field(default_factory=PagedDocumentLinks)
    meta: PagingInformation | None = None


class ErrorItem(AppStoreBaseModel):
    status: str | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None


class ErrorResponse(AppStoreBaseModel):
    errors: list[ErrorItem] = Field(default_factory=list["ErrorItem"])
