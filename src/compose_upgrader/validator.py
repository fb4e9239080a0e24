"""Startup checks for the chain and data directories."""

from __future__ import annotations

from pathlib import Path

from compose_upgrader.constants import COMPOSE_FILE
from compose_upgrader.errors import MissingConfigurationError, MissingDirectoryError
from compose_upgrader.logging import get_logger

log = get_logger("compose_upgrader.validator")


def validate_directories(chain_dir: Path, data_dir: Path) -> None:
    """Ensure both directories exist and the chain holds an active compose file.

    Raises:
        MissingDirectoryError: If either directory is absent or not a directory.
        MissingConfigurationError: If ``docker-compose.yml`` is absent.
    """
    if not chain_dir.is_dir():
        raise MissingDirectoryError("chain", chain_dir)

    if not data_dir.is_dir():
        raise MissingDirectoryError("data", data_dir)

    compose_path = chain_dir / COMPOSE_FILE
    if not compose_path.is_file():
        raise MissingConfigurationError(compose_path)

    log.info(
        "validation_passed",
        chain_dir=str(chain_dir),
        data_dir=str(data_dir),
        compose_file=str(compose_path),
    )
