from __future__ import annotations

from typing import TYPE_CHECKING

from reviewsync.config import data_dir, http_cache_path

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_data_dir_from_env(isolated_data_dir: Path) -> None:
    assert data_dir() == isolated_data_dir.resolve()
    assert not isolated_data_dir.exists()

    assert http_cache_path() == isolated_data_dir.resolve() / "http_cache.db"
    assert isolated_data_dir.is_dir()


def test_data_dir_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("REVIEWSYNC_DATA_DIR")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    assert http_cache_path(create_dir=False) == (
        tmp_path / "xdg" / "reviewsync" / "http_cache.db"
    ).resolve()
    assert not (tmp_path / "xdg").exists()
