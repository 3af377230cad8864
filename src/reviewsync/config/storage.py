"""Where local state (the HTTP cache of archived reports) lives."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "reviewsync"
DATA_DIR_ENV: Final[str] = "REVIEWSYNC_DATA_DIR"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


def data_dir() -> Path:
    """``$REVIEWSYNC_DATA_DIR`` if set, else ``reviewsync`` under the platform data home."""

    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser().resolve()
    if os.name == "nt":
        home = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        home = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return (Path(home) / APP_DIR_NAME).expanduser().resolve()


def http_cache_path(*, create_dir: bool = True) -> Path:
    directory = data_dir()
    if create_dir:
        directory.mkdir(parents=True, exist_ok=True)
    return directory / HTTP_CACHE_FILENAME
