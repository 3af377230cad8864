"""Cloud Storage reader for archived Google Play review reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from reviewsync.adapters.http_resilience import (
    ClientFactory,
    ResilientClient,
    default_client_factory,
)
from reviewsync.config.http_resilience import STORAGE_BASE_URL, storage_resilience
from reviewsync.domain.pagination import Page, drain_pages

from .schema import ArchiveFormatError

if TYPE_CHECKING:
    from types import TracebackType

    from reviewsync.adapters.google_auth import GoogleCredentials
    from reviewsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

REPORT_ENCODING = "utf-16"


class StorageObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class ObjectListing(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: list[StorageObject] = Field(default_factory=list["StorageObject"])
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


def split_bucket_uri(bucket_uri: str) -> tuple[str, str]:
    """Split ``gs://bucket/prefix`` into bucket name and object prefix."""

    if not bucket_uri.startswith("gs://"):
        raise ValueError(f"Not a Cloud Storage URI: {bucket_uri}")
    bucket, _, prefix = bucket_uri.removeprefix("gs://").partition("/")
    if not bucket:
        raise ValueError(f"Missing bucket name in Cloud Storage URI: {bucket_uri}")
    return bucket, prefix


def is_report_for(object_name: str, package_name: str) -> bool:
    # buckets hold the reports of every app of the developer account
    return f"reviews_{package_name}_" in object_name


@dataclass(slots=True)
class ReviewReportsReader:
    credentials: GoogleCredentials
    resilience: ResilienceConfig = field(default_factory=storage_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> ReviewReportsReader:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client

    @property
    def _base_url(self) -> str:
        return self.resilience.base_url or STORAGE_BASE_URL

    async def list_archive_objects(self, bucket_uri: str, resource_key: str) -> list[str]:
        """Download and decode every report of ``resource_key`` (a package name)."""

        bucket, prefix = split_bucket_uri(bucket_uri)

        async def fetch_listing(token: str | None) -> Page[StorageObject]:
            listing = await self._list_objects(bucket, prefix, token)
            return Page(records=listing.items, next_token=listing.next_page_token)

        objects = await drain_pages(fetch_listing)
        reports = [obj for obj in objects if is_report_for(obj.name, resource_key)]
        log.info(
            "Found %s reports: %s",
            len(reports),
            "".join(f"\n\t- {obj.name}" for obj in reports),
        )
        return [await self._download_text(bucket, obj.name) for obj in reports]

    async def _list_objects(self, bucket: str, prefix: str, token: str | None) -> ObjectListing:
        params: dict[str, str] = {"prefix": prefix}
        if token is not None:
            params["pageToken"] = token
        response = await self._http().get(
            f"{self._base_url}b/{quote(bucket, safe='')}/o",
            params=params,
            headers=await self.credentials.authorization(),
        )
        response.raise_for_status()
        return ObjectListing.model_validate(response.json())

    async def _download_text(self, bucket: str, name: str) -> str:
        response = await self._http().get(
            f"{self._base_url}b/{quote(bucket, safe='')}/o/{quote(name, safe='')}",
            params={"alt": "media"},
            headers=await self.credentials.authorization(),
        )
        response.raise_for_status()
        try:
            return response.content.decode(REPORT_ENCODING)
        except UnicodeDecodeError as exc:
            raise ArchiveFormatError(f"Report {name} is not {REPORT_ENCODING} text") from exc
