"""Tests for compose_upgrader.validator: startup directory checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from compose_upgrader.constants import COMPOSE_FILE
from compose_upgrader.errors import (
    MissingConfigurationError,
    MissingDirectoryError,
    StartupValidationError,
)
from compose_upgrader.validator import validate_directories


class TestValidateDirectories:
    """Tests for validate_directories()."""

    def test_valid_layout_passes(self, chain_dir: Path, data_dir: Path) -> None:
        validate_directories(chain_dir, data_dir)

    def test_missing_chain_dir(self, tmp_path: Path, data_dir: Path) -> None:
        missing = tmp_path / "nope"
        with pytest.raises(MissingDirectoryError) as exc_info:
            validate_directories(missing, data_dir)
        assert exc_info.value.role == "chain"
        assert exc_info.value.path == missing

    def test_missing_data_dir(self, tmp_path: Path, chain_dir: Path) -> None:
        with pytest.raises(MissingDirectoryError) as exc_info:
            validate_directories(chain_dir, tmp_path / "nope")
        assert exc_info.value.role == "data"

    def test_chain_checked_before_data(self, tmp_path: Path) -> None:
        with pytest.raises(MissingDirectoryError) as exc_info:
            validate_directories(tmp_path / "a", tmp_path / "b")
        assert exc_info.value.role == "chain"

    def test_file_instead_of_directory(self, tmp_path: Path, chain_dir: Path) -> None:
        not_a_dir = tmp_path / "data.txt"
        not_a_dir.write_text("x")
        with pytest.raises(MissingDirectoryError):
            validate_directories(chain_dir, not_a_dir)

    def test_missing_active_compose_file(self, chain_dir: Path, data_dir: Path) -> None:
        (chain_dir / COMPOSE_FILE).unlink()
        with pytest.raises(MissingConfigurationError) as exc_info:
            validate_directories(chain_dir, data_dir)
        assert exc_info.value.path == chain_dir / COMPOSE_FILE
        assert COMPOSE_FILE in str(exc_info.value)

    def test_errors_share_startup_base(self, tmp_path: Path) -> None:
        with pytest.raises(StartupValidationError):
            validate_directories(tmp_path / "a", tmp_path / "b")
