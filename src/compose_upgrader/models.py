"""Data models for the upgrade sequencer and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class SequencerState(Enum):
    """Where the sequencer is in handling a marker event."""

    IDLE = "idle"
    DETECTED = "detected"
    NO_OP = "no_op"
    UPGRADING = "upgrading"


class UpgradeStatus(Enum):
    """Outcome of one marker event."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    FATAL = "fatal"


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class UpgradeResult:
    """Result of handling one marker event."""

    status: UpgradeStatus = UpgradeStatus.FAILED
    steps_completed: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None
    restored: bool | None = None
    started_at: str = field(default_factory=now_iso)
    completed_at: str | None = None
    duration_seconds: float | None = None

    @property
    def ok(self) -> bool:
        return self.status in (UpgradeStatus.SUCCESS, UpgradeStatus.SKIPPED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "steps_completed": list(self.steps_completed),
            "failed_step": self.failed_step,
            "error": self.error,
            "restored": self.restored,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "duration_seconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class BuildInfo:
    """Build metadata reported by ``--version``."""

    version: str
    build_time: str = "unknown"
    git_commit: str = "unknown"

    def describe(self) -> str:
        return f"{self.version} (built: {self.build_time}, commit: {self.git_commit})"
