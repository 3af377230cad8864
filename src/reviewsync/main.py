#!/usr/bin/env python3

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from reviewsync.adapters.sheets import DEFAULT_REVIEWS_SHEET
from reviewsync.app import RunOptions, run_sync
from reviewsync.config.errors import ConfigurationError
from reviewsync.config.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ValueError(message)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(
        description="Import new App Store and Google Play reviews into the reviews sheet"
    )
    parser.add_argument(
        "--googleSpreadsheetId",
        required=True,
        help="Spreadsheet holding the Config and reviews sheets",
    )
    parser.add_argument(
        "--googlePrivateKeyPath",
        required=True,
        help="Google service account key file (JSON)",
    )
    parser.add_argument(
        "--applePrivateKeyPath",
        action="append",
        required=True,
        help="App Store Connect key file named AuthKey_<keyId>.p8 (repeatable)",
    )
    parser.add_argument(
        "--slackWebhook",
        help="Slack incoming webhook (default: slackReviewsWebhook of the Config sheet)",
    )
    parser.add_argument(
        "--reviewsSheet",
        default=DEFAULT_REVIEWS_SHEET,
        help="Name of the reviews sheet (default: %(default)s)",
    )
    parser.add_argument(
        "--databaseUri",
        help="Store reviews in this SQL database instead of the reviews sheet",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _build_options(args: argparse.Namespace) -> RunOptions:
    return RunOptions(
        google_spreadsheet_id=args.googleSpreadsheetId,
        google_private_key_path=args.googlePrivateKeyPath,
        apple_private_key_paths=frozenset(args.applePrivateKeyPath),
        slack_webhook=args.slackWebhook,
        reviews_sheet=args.reviewsSheet,
        database_uri=args.databaseUri,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
        options = _build_options(parsed_args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        asyncio.run(run_sync(options))
    except ConfigurationError as exc:
        log.error(f"Configuration error: {exc}")
        sys.exit(2)
    except Exception:
        log.exception("Review import failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
