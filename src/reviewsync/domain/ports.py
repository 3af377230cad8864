"""Ports for the collaborators of the review sync."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .reconciliation import ExistingReviewIndex
    from .review import CanonicalReview, Customer, Store


@runtime_checkable
class ReviewSource(Protocol):
    """Fetches and normalizes the reviews of one customer's app on one store."""

    @property
    def customer(self) -> Customer: ...

    @property
    def store(self) -> Store: ...

    async def fetch_reviews(self, existing: ExistingReviewIndex) -> list[CanonicalReview]:
        """Return normalized candidates; ``existing`` may only be used to bound fetching."""
        ...


@runtime_checkable
class ReviewTable(Protocol):
    """Append-only table of persisted review rows."""

    async def read_all(self) -> tuple[list[str], list[list[str]]]:
        """Return the header row and all data rows (both empty for an empty table)."""
        ...

    async def append(self, reviews: Sequence[CanonicalReview]) -> None: ...


@runtime_checkable
class ArchiveReader(Protocol):
    """Lists the archived CSV exports of one app."""

    async def list_archive_objects(self, bucket_uri: str, resource_key: str) -> list[str]:
        """Return the decoded text of each archived export."""
        ...


@runtime_checkable
class Notifier(Protocol):
    async def send(self, payload: dict[str, object]) -> None: ...


__all__ = ["ArchiveReader", "Notifier", "ReviewSource", "ReviewTable"]
