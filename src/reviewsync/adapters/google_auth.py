"""Google service-account credentials shared by the Google adapters."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final

from google.auth.transport.requests import Request
from google.oauth2 import service_account

from reviewsync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from google.auth.credentials import Credentials

GOOGLE_SCOPES: Final[tuple[str, ...]] = (
    # reviews spreadsheet and config sheet
    "https://www.googleapis.com/auth/spreadsheets",
    # Google Play Developer API
    "https://www.googleapis.com/auth/androidpublisher",
    # archived review reports in Cloud Storage
    "https://www.googleapis.com/auth/devstorage.read_only",
)


class GoogleCredentials:
    """Bearer tokens for Google APIs, refreshed when expired."""

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials
        self._lock = asyncio.Lock()

    @classmethod
    def from_service_account_file(cls, path: str) -> GoogleCredentials:
        try:
            credentials = service_account.Credentials.from_service_account_file(  # pyright: ignore[reportUnknownMemberType]
                path, scopes=list(GOOGLE_SCOPES)
            )
        except (OSError, ValueError) as exc:
            raise ConfigurationError(
                f"Could not load Google service account key from {path}: {exc}"
            ) from exc
        return cls(credentials)

    async def token(self) -> str:
        async with self._lock:
            if not self._credentials.valid:
                await asyncio.to_thread(self._credentials.refresh, Request())
            token = self._credentials.token
        if token is None:
            raise RuntimeError("Google credentials did not yield an access token")
        return token

    async def authorization(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {await self.token()}"}
