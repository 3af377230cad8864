"""Customers and their store apps, read from the ``Config`` sheet of the spreadsheet.

The sheet is a grid where the first column holds a key, the second a description for the
humans editing it and every following column the value for one customer::

    customerName                  | Customer names  | Acme        | Globex
    googlePlayStorePackageNames   | Android apps    | com.acme    |
    appleAppResourceIds           | iOS apps        | 1234567     | 7654321
    ...
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from reviewsync.domain.review import Customer

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = getLogger(__name__)

CONFIG_SHEET_NAME: Final[str] = "Config"

CUSTOMER_NAME: Final[str] = "customerName"
GOOGLE_PLAY_PACKAGE_NAMES: Final[str] = "googlePlayStorePackageNames"
APPLE_RESOURCE_IDS: Final[str] = "appleAppResourceIds"
REPORTS_BUCKET_URIS: Final[str] = "gsReviewsReportsBucketsUris"
APPLE_ISSUER_IDS: Final[str] = "appleAppStoreIssuerIds"
APPLE_KEY_IDS: Final[str] = "appleAppStoreKeyIds"
SLACK_WEBHOOK: Final[str] = "slackReviewsWebhook"


@dataclass(frozen=True, slots=True)
class AndroidApp:
    package_name: str
    reports_bucket_uri: str | None = None


@dataclass(frozen=True, slots=True)
class AppleApp:
    resource_id: str
    issuer_id: str
    key_id: str
    private_key_path: str


@dataclass(frozen=True, slots=True)
class CustomerApps:
    customer: Customer
    android: AndroidApp | None = None
    apple: AppleApp | None = None


@dataclass(frozen=True, slots=True)
class AppsConfig:
    customers: tuple[CustomerApps, ...]
    slack_webhook: str | None = None


class SheetsConfig:
    """Key to values view of the config grid."""

    def __init__(self, entries: dict[str, list[str]]) -> None:
        self._entries = entries

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> SheetsConfig:
        entries: dict[str, list[str]] = {}
        for row in rows:
            if not row or not row[0]:
                continue
            entries[row[0]] = [str(value) for value in row[2:]]
        return cls(entries)

    def row(self, key: str) -> list[str]:
        try:
            return self._entries[key]
        except KeyError:
            raise MissingConfigurationError(f"Config with key {key} is not defined") from None

    def first(self, key: str) -> str | None:
        values = self._entries.get(key)
        if not values or not values[0]:
            return None
        return values[0]


def _padded(values: list[str], size: int) -> list[str]:
    # the Sheets API drops trailing empty cells of a row
    return values + [""] * (size - len(values))


def find_private_key_path(key_id: str, paths: Iterable[str]) -> str | None:
    return next((path for path in sorted(paths) if key_id in path), None)


def load_apps_config(config: SheetsConfig, apple_private_key_paths: Iterable[str]) -> AppsConfig:
    key_paths = set(apple_private_key_paths)
    names = config.row(CUSTOMER_NAME)
    size = len(names)
    package_names = _padded(config.row(GOOGLE_PLAY_PACKAGE_NAMES), size)
    resource_ids = _padded(config.row(APPLE_RESOURCE_IDS), size)
    bucket_uris = _padded(config.row(REPORTS_BUCKET_URIS), size)
    issuer_ids = _padded(config.row(APPLE_ISSUER_IDS), size)
    key_ids = _padded(config.row(APPLE_KEY_IDS), size)

    log.info("Customers in apps config: %s", ", ".join(names))

    customers: list[CustomerApps] = []
    seen: set[str] = set()
    for name, package_name, resource_id, bucket_uri, issuer_id, key_id in zip(
        names, package_names, resource_ids, bucket_uris, issuer_ids, key_ids, strict=False
    ):
        if not name:
            raise ConfigurationError(
                "Spreadsheet config error: the customer name must be specified! In column "
                f"containing {package_name}, {resource_id}, {bucket_uri}, {issuer_id}, {key_id}"
            )
        if name in seen:
            raise ConfigurationError(f"Spreadsheet config error: duplicate customer {name}")
        seen.add(name)

        android = AndroidApp(package_name, bucket_uri or None) if package_name else None
        apple = None
        if resource_id:
            if not key_id or not issuer_id:
                raise ConfigurationError(
                    "Spreadsheet config error: the Apple App Store key ID and issuer ID must "
                    f"be specified if the Apple resource ID is set ({resource_id})! In column "
                    f"of customer {name}"
                )
            key_path = find_private_key_path(key_id, key_paths)
            if key_path is None:
                raise ConfigurationError(
                    f"No Apple App Store Connect private key path specified for {name} with "
                    f"resource ID {resource_id} (issuer ID: {issuer_id}, key ID: {key_id}). "
                    "Did you provide the key file with --applePrivateKeyPath and is it named "
                    f"AuthKey_{key_id}.p8?"
                )
            apple = AppleApp(resource_id, issuer_id, key_id, key_path)

        customers.append(CustomerApps(Customer(name), android, apple))

    return AppsConfig(customers=tuple(customers), slack_webhook=config.first(SLACK_WEBHOOK))
