"""Exception hierarchy for Compose Upgrader.

Startup errors terminate the process. Everything raised while an upgrade is
running is caught by the sequencer and reported through the log.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class UpgraderError(Exception):
    """Base class for all Compose Upgrader errors."""


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class StartupValidationError(UpgraderError):
    """The chain or data directory layout is not usable."""


class MissingDirectoryError(StartupValidationError):
    """A required directory does not exist."""

    def __init__(self, role: str, path: Path) -> None:
        self.role = role
        self.path = path
        super().__init__(f"{role} folder does not exist: {path}")


class MissingConfigurationError(StartupValidationError):
    """The active compose file is missing from the chain directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{path.name} not found in chain folder: {path}")


class WatcherSetupError(UpgraderError):
    """The filesystem watch subscription could not be created."""


# ---------------------------------------------------------------------------
# Watch channel
# ---------------------------------------------------------------------------


class WatchChannelError(UpgraderError):
    """A non-fatal error reported by the notification channel."""


class WatchChannelClosed(UpgraderError):
    """The notification channel has been closed and will yield no more events."""


# ---------------------------------------------------------------------------
# Command runner
# ---------------------------------------------------------------------------


class CommandExecutionError(UpgraderError):
    """An external command could not be launched or exited non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        cwd: Path,
        returncode: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.command = list(command)
        self.cwd = cwd
        self.returncode = returncode
        self.cause = cause
        if returncode is not None:
            detail = f"exit status {returncode}"
        else:
            detail = str(cause)
        super().__init__(f"command {' '.join(self.command)!r} failed in {cwd}: {detail}")


# ---------------------------------------------------------------------------
# Upgrade steps
# ---------------------------------------------------------------------------


class UpgradeStepError(UpgraderError):
    """A step of the upgrade sequence failed."""

    step = "unknown"


class ContainerStopFailure(UpgradeStepError):
    """Stopping containers failed; compose files are untouched."""

    step = "compose_down"


class BackupRenameFailure(UpgradeStepError):
    """Moving the active compose file to the backup path failed."""

    step = "backup"


class PromoteRenameFailure(UpgradeStepError):
    """Moving the pending compose file into place failed.

    ``restored`` tells whether the backup was moved back to the active path.
    """

    step = "promote"

    def __init__(self, message: str, restored: bool = True) -> None:
        self.restored = restored
        super().__init__(message)


class CompensationFailure(PromoteRenameFailure):
    """Promotion failed and restoring the backup failed too.

    No active compose file exists afterwards; an operator has to move
    ``docker-compose.yml-backup`` or ``docker-compose.yml-next`` into place.
    """

    def __init__(self, promote_error: OSError, restore_error: OSError) -> None:
        self.promote_error = promote_error
        self.restore_error = restore_error
        super().__init__(
            "failed to promote next compose file AND failed to restore backup: "
            f"{promote_error}, restore error: {restore_error}",
            restored=False,
        )


class ContainerStartFailure(UpgradeStepError):
    """Starting containers failed after the new compose file was promoted."""

    step = "compose_up"
