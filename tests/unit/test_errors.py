"""Unit tests for the error hierarchy."""

from __future__ import annotations

from pathlib import Path

from compose_upgrader.errors import (
    BackupRenameFailure,
    CommandExecutionError,
    CompensationFailure,
    ContainerStartFailure,
    ContainerStopFailure,
    MissingConfigurationError,
    MissingDirectoryError,
    PromoteRenameFailure,
    StartupValidationError,
    UpgraderError,
    UpgradeStepError,
)


class TestStartupErrors:
    def test_missing_directory_message(self) -> None:
        err = MissingDirectoryError("chain", Path("/srv/chain"))
        assert str(err) == "chain folder does not exist: /srv/chain"
        assert isinstance(err, StartupValidationError)

    def test_missing_configuration_message(self) -> None:
        err = MissingConfigurationError(Path("/srv/chain/docker-compose.yml"))
        assert "docker-compose.yml not found in chain folder" in str(err)
        assert isinstance(err, StartupValidationError)


class TestCommandExecutionError:
    def test_exit_status_message(self) -> None:
        err = CommandExecutionError(["docker-compose", "down"], Path("/srv/chain"), returncode=1)
        assert "'docker-compose down'" in str(err)
        assert "exit status 1" in str(err)

    def test_launch_failure_message(self) -> None:
        cause = FileNotFoundError(2, "No such file or directory", "docker-compose")
        err = CommandExecutionError(["docker-compose", "up", "-d"], Path("/srv"), cause=cause)
        assert err.returncode is None
        assert "No such file or directory" in str(err)


class TestUpgradeStepErrors:
    def test_step_names(self) -> None:
        assert ContainerStopFailure.step == "compose_down"
        assert BackupRenameFailure.step == "backup"
        assert PromoteRenameFailure.step == "promote"
        assert ContainerStartFailure.step == "compose_up"

    def test_compensation_failure_is_unrestored_promote_failure(self) -> None:
        err = CompensationFailure(OSError("promote"), OSError("restore"))
        assert isinstance(err, PromoteRenameFailure)
        assert isinstance(err, UpgradeStepError)
        assert isinstance(err, UpgraderError)
        assert err.restored is False
        assert err.step == "promote"
        assert "promote" in str(err)
        assert "restore" in str(err)

    def test_promote_failure_restored_by_default(self) -> None:
        assert PromoteRenameFailure("x").restored is True
