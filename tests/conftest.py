"""Shared fixtures for Compose Upgrader tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from compose_upgrader.config import get_settings
from compose_upgrader.constants import COMPOSE_FILE

ORIGINAL_COMPOSE = b"services:\n  node:\n    image: chain:v1.0.0\n"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host environment variables and cached settings out of tests."""
    for var in (
        "COMPOSE_UPGRADER_ENVIRONMENT",
        "COMPOSE_UPGRADER_LOG_LEVEL",
        "COMPOSE_UPGRADER_SETTLE_DELAY_SECONDS",
        "COMPOSE_UPGRADER_COMPOSE_COMMAND",
        "COMPOSE_UPGRADER_BUILD_TIME",
        "COMPOSE_UPGRADER_GIT_COMMIT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def chain_dir(tmp_path: Path) -> Path:
    """A chain directory holding an active docker-compose.yml."""
    path = tmp_path / "chain"
    path.mkdir()
    (path / COMPOSE_FILE).write_bytes(ORIGINAL_COMPOSE)
    return path


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    """An empty data directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path
