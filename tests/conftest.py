from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from reviewsync.domain.review import Customer

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("REVIEWSYNC_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def acme() -> Customer:
    return Customer("Acme")


@pytest.fixture
def globex() -> Customer:
    return Customer("Globex")
