"""Unit tests for compose_upgrader.models."""

from __future__ import annotations

import dataclasses

import pytest

from compose_upgrader.models import BuildInfo, SequencerState, UpgradeResult, UpgradeStatus


class TestUpgradeResult:
    """Tests for UpgradeResult."""

    def test_defaults(self) -> None:
        result = UpgradeResult()
        assert result.status == UpgradeStatus.FAILED
        assert result.steps_completed == []
        assert result.restored is None
        assert result.started_at

    @pytest.mark.parametrize(
        ("status", "ok"),
        [
            (UpgradeStatus.SUCCESS, True),
            (UpgradeStatus.SKIPPED, True),
            (UpgradeStatus.FAILED, False),
            (UpgradeStatus.FATAL, False),
        ],
    )
    def test_ok(self, status: UpgradeStatus, ok: bool) -> None:
        assert UpgradeResult(status=status).ok is ok

    def test_to_dict(self) -> None:
        result = UpgradeResult(
            status=UpgradeStatus.FAILED,
            steps_completed=["compose_down"],
            failed_step="backup",
            error="failed to backup docker-compose.yml",
        )

        data = result.to_dict()

        assert data["status"] == "failed"
        assert data["steps_completed"] == ["compose_down"]
        assert data["failed_step"] == "backup"
        assert data["restored"] is None

    def test_steps_not_shared_between_instances(self) -> None:
        first = UpgradeResult()
        first.steps_completed.append("compose_down")
        assert UpgradeResult().steps_completed == []


class TestBuildInfo:
    """Tests for BuildInfo."""

    def test_describe(self) -> None:
        info = BuildInfo(version="0.1.0", build_time="2026-10-19", git_commit="abc1234")
        assert info.describe() == "0.1.0 (built: 2026-10-19, commit: abc1234)"

    def test_defaults_unknown(self) -> None:
        assert BuildInfo(version="dev").describe() == "dev (built: unknown, commit: unknown)"

    def test_immutable(self) -> None:
        info = BuildInfo(version="0.1.0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            info.version = "0.2.0"  # type: ignore[misc]


class TestSequencerState:
    def test_values(self) -> None:
        assert [s.value for s in SequencerState] == ["idle", "detected", "no_op", "upgrading"]
