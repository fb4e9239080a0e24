"""Command-line entry point for Compose Upgrader."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from compose_upgrader import __version__
from compose_upgrader.config import Settings, get_settings
from compose_upgrader.errors import StartupValidationError, WatcherSetupError
from compose_upgrader.logging import get_logger, setup_logging
from compose_upgrader.models import BuildInfo
from compose_upgrader.runner import ComposeClient
from compose_upgrader.sequencer import UpgradeSequencer
from compose_upgrader.validator import validate_directories
from compose_upgrader.watcher import UpgradeWatcher

PROG = "compose-upgrader"

DESCRIPTION = """\
Watches for upgrade-info.json in a data directory and swaps in a staged
docker-compose.yml-next for the chain's services.

When upgrade-info.json appears:
  - if docker-compose.yml-next exists: compose down, back up
    docker-compose.yml, promote docker-compose.yml-next, compose up -d
  - if docker-compose.yml-next is missing: the event is only logged
"""


def build_parser(build_info: BuildInfo) -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "chain_dir",
        type=Path,
        help="directory containing docker-compose.yml and docker-compose.yml-next",
    )
    parser.add_argument(
        "data_dir",
        type=Path,
        help="directory to watch for upgrade-info.json",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {build_info.describe()}",
    )
    return parser


def build_info_from_settings(settings: Settings) -> BuildInfo:
    return BuildInfo(
        version=__version__,
        build_time=settings.build_time,
        git_commit=settings.git_commit,
    )


def run(chain_dir: Path, data_dir: Path, settings: Settings, build_info: BuildInfo) -> int:
    """Validate, then watch until the channel closes. Returns the exit code."""
    log = get_logger("compose_upgrader.cli")
    log.info("starting_compose_upgrader", version=build_info.describe())
    log.info("chain_folder", path=str(chain_dir))
    log.info("data_folder", path=str(data_dir))

    try:
        validate_directories(chain_dir, data_dir)
    except StartupValidationError as exc:
        log.error("validation_failed", error=str(exc))
        return 1

    sequencer = UpgradeSequencer(
        chain_dir,
        ComposeClient(settings.compose_argv),
        settle_delay=settings.settle_delay_seconds,
    )
    watcher = UpgradeWatcher(data_dir, sequencer.handle_marker)

    try:
        with watcher:
            watcher.run()
    except WatcherSetupError as exc:
        log.error("watcher_setup_failed", error=str(exc))
        return 1
    except KeyboardInterrupt:
        log.info("shutdown_requested")

    log.info("compose_upgrader_stopped")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run the upgrader.

    Arguments are parsed before a settings error is reported, so ``--help``
    and ``--version`` keep working with a broken environment.
    """
    settings: Settings | None = None
    settings_error: ValidationError | None = None
    try:
        settings = get_settings()
    except ValidationError as exc:
        settings_error = exc

    if settings is not None:
        build_info = build_info_from_settings(settings)
    else:
        build_info = BuildInfo(version=__version__)
    args = build_parser(build_info).parse_args(argv)

    if settings is None:
        print(f"Error: invalid configuration: {settings_error}", file=sys.stderr)
        return 1

    setup_logging()
    return run(args.chain_dir, args.data_dir, settings, build_info)
