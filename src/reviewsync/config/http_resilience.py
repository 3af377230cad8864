"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


# Failed calls surface to the sync unit; the next run fetches them again.
NO_RETRY = RetryPolicy(total=0)


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = NO_RETRY
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None


GOOGLE_PLAY_BASE_URL = "https://androidpublisher.googleapis.com/androidpublisher/v3/"
APP_STORE_BASE_URL = "https://api.appstoreconnect.apple.com/v1/"
SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets/"
STORAGE_BASE_URL = "https://storage.googleapis.com/storage/v1/"

_ARCHIVE_CACHE_TTL_SECONDS = 7 * 24 * 3600.0


def _is_not_object_listing(payload: object) -> bool:
    # Listings change as new reports land; report contents never do.
    return not (isinstance(payload, dict) and payload.get("kind") == "storage#objects")


def google_play_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="google-play",
        base_url=GOOGLE_PLAY_BASE_URL,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


def app_store_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="app-store",
        base_url=APP_STORE_BASE_URL,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )


def sheets_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="sheets",
        base_url=SHEETS_BASE_URL,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
    )


def storage_resilience(*, cache_path: str | None = None) -> ResilienceConfig:
    return ResilienceConfig(
        name="cloud-storage",
        base_url=STORAGE_BASE_URL,
        timeout_seconds=120.0,
        cache=CacheConfig(
            sqlite_path=cache_path,
            default_ttl_seconds=_ARCHIVE_CACHE_TTL_SECONDS,
            should_cache=_is_not_object_listing,
        ),
    )


def slack_resilience() -> ResilienceConfig:
    return ResilienceConfig(name="slack", timeout_seconds=10.0)
