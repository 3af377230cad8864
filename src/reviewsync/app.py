"""Application orchestration: configuration, adapters, sync and report."""

from __future__ import annotations

from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from reviewsync.adapters.app_store import AppStoreClient, AppStoreCredentials, AppStoreReviewSource
from reviewsync.adapters.google_auth import GoogleCredentials
from reviewsync.adapters.google_play import GooglePlayClient, GooglePlayReviewSource
from reviewsync.adapters.http_resilience import default_client_factory
from reviewsync.adapters.play_reports import ReviewReportsReader
from reviewsync.adapters.sheets import (
    DEFAULT_REVIEWS_SHEET,
    SheetReviewTable,
    SheetsClient,
    read_sheets_config,
)
from reviewsync.adapters.slack import SlackNotifier
from reviewsync.adapters.sqlalchemy import SqlAlchemyReviewTable
from reviewsync.config.apps import load_apps_config
from reviewsync.config.errors import ConfigurationError, MissingConfigurationError
from reviewsync.domain.sync import SyncReport, sync_reviews
from reviewsync.reporting import build_report_payload, error_payload

if TYPE_CHECKING:
    from reviewsync.adapters.http_resilience import ClientFactory
    from reviewsync.config.apps import AppsConfig
    from reviewsync.domain.ports import Notifier, ReviewSource, ReviewTable

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunOptions:
    google_spreadsheet_id: str
    google_private_key_path: str
    apple_private_key_paths: frozenset[str] = field(default_factory=frozenset)
    slack_webhook: str | None = None
    reviews_sheet: str = DEFAULT_REVIEWS_SHEET
    database_uri: str | None = None


def build_sources(
    apps: AppsConfig,
    *,
    google_play: GooglePlayClient,
    archive: ReviewReportsReader,
    stack: AsyncExitStack,
    client_factory: ClientFactory = default_client_factory,
) -> list[ReviewSource]:
    """One source per configured (customer, store) pair, in config order."""

    sources: list[ReviewSource] = []
    for entry in apps.customers:
        if entry.android is not None:
            sources.append(
                GooglePlayReviewSource(
                    customer=entry.customer,
                    package_name=entry.android.package_name,
                    client=google_play,
                    archive=archive,
                    reports_bucket_uri=entry.android.reports_bucket_uri,
                )
            )
        if entry.apple is not None:
            credentials = AppStoreCredentials.from_key_file(
                entry.apple.private_key_path,
                key_id=entry.apple.key_id,
                issuer_id=entry.apple.issuer_id,
            )
            client = AppStoreClient(credentials, client_factory=client_factory)
            stack.push_async_callback(client.aclose)
            sources.append(
                AppStoreReviewSource(
                    customer=entry.customer,
                    resource_id=entry.apple.resource_id,
                    client=client,
                )
            )
    return sources


async def notify_failure(notifier: Notifier, error: BaseException) -> None:
    """Last-resort notification; a failure to send is logged, not raised."""

    try:
        await notifier.send(error_payload(error))
    except Exception:
        log.exception("Could not send the error notification")


async def run_sync(
    options: RunOptions,
    *,
    client_factory: ClientFactory = default_client_factory,
    now: datetime | None = None,
) -> SyncReport:
    """Load the apps config, sync every unit and send the report to Slack."""

    credentials = GoogleCredentials.from_service_account_file(options.google_private_key_path)

    async with AsyncExitStack() as stack:
        sheets = SheetsClient(
            credentials, options.google_spreadsheet_id, client_factory=client_factory
        )
        stack.push_async_callback(sheets.aclose)

        sheets_config = await read_sheets_config(sheets)
        apps = load_apps_config(sheets_config, options.apple_private_key_paths)

        webhook = options.slack_webhook or apps.slack_webhook
        if not webhook:
            raise MissingConfigurationError(
                "No Slack webhook: pass --slackWebhook or set slackReviewsWebhook in the "
                "Config sheet"
            )
        notifier = SlackNotifier(webhook, client_factory=client_factory)
        stack.push_async_callback(notifier.aclose)

        try:
            report = await _sync_and_report(
                options,
                apps,
                sheets=sheets,
                credentials=credentials,
                notifier=notifier,
                stack=stack,
                client_factory=client_factory,
                now=now,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            await notify_failure(notifier, exc)
            raise
    return report


async def _sync_and_report(
    options: RunOptions,
    apps: AppsConfig,
    *,
    sheets: SheetsClient,
    credentials: GoogleCredentials,
    notifier: Notifier,
    stack: AsyncExitStack,
    client_factory: ClientFactory,
    now: datetime | None,
) -> SyncReport:
    google_play = GooglePlayClient(credentials, client_factory=client_factory)
    stack.push_async_callback(google_play.aclose)
    archive = ReviewReportsReader(credentials, client_factory=client_factory)
    stack.push_async_callback(archive.aclose)

    sources = build_sources(
        apps,
        google_play=google_play,
        archive=archive,
        stack=stack,
        client_factory=client_factory,
    )

    table: ReviewTable
    if options.database_uri:
        table = SqlAlchemyReviewTable.from_uri(options.database_uri)
    else:
        table = SheetReviewTable(sheets, options.reviews_sheet)

    report = await sync_reviews(sources, table)

    payload = build_report_payload(
        report,
        sheet_url=sheets.browser_url,
        now=now or datetime.now(UTC),
    )
    if payload is None:
        log.info("No new reviews and no failures, nothing to report")
        return report

    log.info("Sending message with imported reviews to Slack")
    await notifier.send(payload)
    return report
