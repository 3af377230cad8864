"""Errors raised at the boundary of a sync unit."""

from __future__ import annotations


class SyncUnitError(RuntimeError):
    """Base class for failures isolated to one (customer, store) unit."""


class SourceFetchError(SyncUnitError):
    """Raised when reviews could not be fetched or parsed from a source."""


class PersistenceError(SyncUnitError):
    """Raised when new reviews could not be appended to the reviews table."""
