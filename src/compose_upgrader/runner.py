"""External command execution.

Commands inherit this process's stdout and stderr so compose output shows up
in the same stream as the upgrader's own logs. There is no timeout: a hung
command blocks the caller until it exits.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from compose_upgrader.constants import COMPOSE_DOWN_ARGS, COMPOSE_UP_ARGS
from compose_upgrader.errors import CommandExecutionError
from compose_upgrader.logging import get_logger

log = get_logger("compose_upgrader.runner")


class CommandRunner:
    """Runs external programs and reports failure as ``CommandExecutionError``."""

    def run(self, cwd: Path, program: str, *args: str) -> None:
        """Run ``program`` with ``args`` in ``cwd`` and wait for it to exit."""
        command = [program, *args]
        log.info("running_command", cwd=str(cwd), command=command)
        try:
            completed = subprocess.run(command, cwd=cwd, check=False)
        except OSError as exc:
            raise CommandExecutionError(command, cwd, cause=exc) from exc

        if completed.returncode != 0:
            raise CommandExecutionError(command, cwd, returncode=completed.returncode)


class ComposeClient:
    """The two compose invocations the upgrade sequence needs."""

    def __init__(self, compose_argv: Sequence[str], runner: CommandRunner | None = None) -> None:
        if not compose_argv:
            raise ValueError("compose_argv must name a program")
        self._program = compose_argv[0]
        self._base_args = tuple(compose_argv[1:])
        self._runner = runner or CommandRunner()

    def down(self, chain_dir: Path) -> None:
        """Stop all services defined by the compose file in ``chain_dir``."""
        self._runner.run(chain_dir, self._program, *self._base_args, *COMPOSE_DOWN_ARGS)

    def up(self, chain_dir: Path) -> None:
        """Start all services in ``chain_dir`` in detached mode."""
        self._runner.run(chain_dir, self._program, *self._base_args, *COMPOSE_UP_ARGS)
