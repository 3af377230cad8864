"""App Store Connect API keys, signed as short-lived ES256 JWTs.

https://developer.apple.com/documentation/appstoreconnectapi/generating-tokens-for-api-requests
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Final

import jwt

from reviewsync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

TOKEN_LIFETIME: Final[timedelta] = timedelta(minutes=20)
_REFRESH_MARGIN: Final[timedelta] = timedelta(minutes=1)
AUDIENCE: Final[str] = "appstoreconnect-v1"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class _Token:
    expiration: datetime
    value: str


class AppStoreCredentials:
    def __init__(
        self,
        private_key: str,
        *,
        key_id: str,
        issuer_id: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._private_key = private_key
        self.key_id = key_id
        self.issuer_id = issuer_id
        self._clock = clock
        self._token: _Token | None = None

    @classmethod
    def from_key_file(cls, path: str, *, key_id: str, issuer_id: str) -> AppStoreCredentials:
        try:
            private_key = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"Could not read App Store Connect private key {path}: {exc}"
            ) from exc
        return cls(private_key, key_id=key_id, issuer_id=issuer_id)

    def token(self) -> str:
        """Return the cached token, signing a new one when it is about to expire."""

        now = self._clock()
        current = self._token
        if current is not None and now < current.expiration - _REFRESH_MARGIN:
            return current.value

        expiration = now + TOKEN_LIFETIME
        value = jwt.encode(
            {
                "iss": self.issuer_id,
                "iat": int(now.timestamp()),
                "exp": int(expiration.timestamp()),
                "aud": AUDIENCE,
            },
            self._private_key,
            algorithm="ES256",
            headers={"kid": self.key_id, "typ": "JWT"},
        )
        self._token = _Token(expiration=expiration, value=value)
        return value
