"""Upgrade sequencer: swaps the staged compose file into place.

Lifecycle for one marker event:
1. Wait the settle delay so the marker writer can finish
2. No ``docker-compose.yml-next``: log and do nothing
3. Stop containers (compose down)
4. Move ``docker-compose.yml`` to ``docker-compose.yml-backup``
5. Move ``docker-compose.yml-next`` to ``docker-compose.yml``,
   moving the backup back if this fails
6. Start containers (compose up -d)

Steps run strictly in order and each one completes (or is compensated)
before the next begins. Failures are logged and returned, never raised.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from compose_upgrader.constants import (
    COMPOSE_BACKUP_FILE,
    COMPOSE_FILE,
    COMPOSE_NEXT_FILE,
    DEFAULT_SETTLE_DELAY_SECONDS,
)
from compose_upgrader.errors import (
    BackupRenameFailure,
    CommandExecutionError,
    CompensationFailure,
    ContainerStartFailure,
    ContainerStopFailure,
    PromoteRenameFailure,
    UpgradeStepError,
)
from compose_upgrader.logging import get_logger
from compose_upgrader.models import SequencerState, UpgradeResult, UpgradeStatus, now_iso
from compose_upgrader.runner import ComposeClient

log = get_logger("compose_upgrader.sequencer")


class UpgradeSequencer:
    """Runs the down/backup/promote/up sequence for one chain directory."""

    def __init__(
        self,
        chain_dir: Path,
        compose: ComposeClient,
        settle_delay: float = DEFAULT_SETTLE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._chain_dir = chain_dir
        self._compose = compose
        self._settle_delay = settle_delay
        self._sleep = sleep
        self._state = SequencerState.IDLE

        self.active_path = chain_dir / COMPOSE_FILE
        self.next_path = chain_dir / COMPOSE_NEXT_FILE
        self.backup_path = chain_dir / COMPOSE_BACKUP_FILE

    @property
    def state(self) -> SequencerState:
        return self._state

    # ------------------------------------------------------------------
    # Primary flow
    # ------------------------------------------------------------------

    def handle_marker(self) -> UpgradeResult:
        """React to the upgrade marker appearing in the data directory."""
        start = time.monotonic()
        result = UpgradeResult()
        self._state = SequencerState.DETECTED

        try:
            if self._settle_delay > 0:
                self._sleep(self._settle_delay)

            if not self.next_path.exists():
                self._state = SequencerState.NO_OP
                log.info("upgrade_skipped_no_next_file", next_file=str(self.next_path))
                result.status = UpgradeStatus.SKIPPED
                return result

            log.info("next_compose_found", next_file=str(self.next_path))
            self._state = SequencerState.UPGRADING
            self._perform_upgrade(result)
            result.status = UpgradeStatus.SUCCESS
            log.info("upgrade_completed", steps=result.steps_completed)
            return result

        except CompensationFailure as exc:
            result.status = UpgradeStatus.FATAL
            result.failed_step = exc.step
            result.error = str(exc)
            result.restored = False
            log.critical(
                "upgrade_failed_no_active_compose_file",
                error=str(exc),
                active_file=str(self.active_path),
                backup_file=str(self.backup_path),
                next_file=str(self.next_path),
                action="manual recovery required",
            )
            return result
        except UpgradeStepError as exc:
            result.status = UpgradeStatus.FAILED
            result.failed_step = exc.step
            result.error = str(exc)
            if isinstance(exc, PromoteRenameFailure):
                result.restored = exc.restored
            log.error(
                "upgrade_failed",
                step=exc.step,
                error=str(exc),
                restored=result.restored,
                steps_completed=result.steps_completed,
            )
            return result
        except Exception as exc:
            result.status = UpgradeStatus.FAILED
            result.error = f"Unexpected error: {exc}"
            log.exception("upgrade_failed_unexpected", steps_completed=result.steps_completed)
            return result
        finally:
            result.duration_seconds = round(time.monotonic() - start, 3)
            result.completed_at = now_iso()
            (log.info if result.ok else log.warning)("upgrade_result", **result.to_dict())
            self._state = SequencerState.IDLE

    def _perform_upgrade(self, result: UpgradeResult) -> None:
        log.info("upgrade_started", chain_dir=str(self._chain_dir))

        log.info("step_compose_down", step=1)
        try:
            self._compose.down(self._chain_dir)
        except CommandExecutionError as exc:
            raise ContainerStopFailure(f"failed to stop containers: {exc}") from exc
        result.steps_completed.append(ContainerStopFailure.step)

        log.info("step_backup", step=2, source=COMPOSE_FILE, target=COMPOSE_BACKUP_FILE)
        try:
            self._rename(self.active_path, self.backup_path)
        except OSError as exc:
            raise BackupRenameFailure(f"failed to backup {COMPOSE_FILE}: {exc}") from exc
        result.steps_completed.append(BackupRenameFailure.step)

        log.info("step_promote", step=3, source=COMPOSE_NEXT_FILE, target=COMPOSE_FILE)
        try:
            self._rename(self.next_path, self.active_path)
        except OSError as exc:
            self._restore_backup(exc)
        result.steps_completed.append(PromoteRenameFailure.step)

        log.info("step_compose_up", step=4)
        try:
            self._compose.up(self._chain_dir)
        except CommandExecutionError as exc:
            raise ContainerStartFailure(f"failed to start containers: {exc}") from exc
        result.steps_completed.append(ContainerStartFailure.step)

    def _restore_backup(self, promote_error: OSError) -> None:
        """Move the backup back to the active path after a failed promotion.

        Always raises: ``PromoteRenameFailure`` if the restore worked,
        ``CompensationFailure`` if it did not.
        """
        log.warning("promote_failed_restoring_backup", error=str(promote_error))
        try:
            self._rename(self.backup_path, self.active_path)
        except OSError as restore_error:
            raise CompensationFailure(promote_error, restore_error) from restore_error
        raise PromoteRenameFailure(
            f"failed to promote {COMPOSE_NEXT_FILE} (backup restored): {promote_error}",
            restored=True,
        ) from promote_error

    @staticmethod
    def _rename(source: Path, target: Path) -> None:
        source.replace(target)
