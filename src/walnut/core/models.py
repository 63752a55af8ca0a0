"""Step and run result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from walnut.errors import WalnutError


class StepStatus(Enum):
    PENDING = "pending"
    BUILT = "built"
    INVOKED = "invoked"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.SKIPPED)


@dataclass(frozen=True)
class LogEntry:
    """A ``log``/``warn`` call made by a method through its context."""

    level: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class StepInvocation:
    """One dataset-bound step of a run.

    Attributes:
        action_type: Identifier of the method to run.
        params: Dataset row for this step; may contain placeholders.
        description: Step description; ``${name}`` markers become ``ctx.args``.
        locator: Element locator for methods that need one.
        name: Display name, defaults to the action type.
    """

    action_type: str
    params: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    locator: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.action_type


@dataclass
class StepResult:
    """Outcome of one step invocation."""

    action_type: str
    name: str
    status: StepStatus = StepStatus.PENDING
    description: str | None = None
    error: WalnutError | None = None
    value: Any = None
    logs: list[LogEntry] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status is StepStatus.COMPLETED

    @classmethod
    def skipped(cls, invocation: StepInvocation) -> StepResult:
        return cls(
            action_type=invocation.action_type,
            name=invocation.display_name,
            status=StepStatus.SKIPPED,
            description=invocation.description,
        )

    def fail(self, error: WalnutError) -> StepResult:
        if error.action_type is None:
            error.action_type = self.action_type
        self.error = error
        self.status = StepStatus.FAILED
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_type": self.action_type,
            "name": self.name,
            "status": self.status.value,
            "description": self.description,
            "error": self.error.to_dict() if self.error else None,
            "logs": [entry.to_dict() for entry in self.logs],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
        }


@dataclass
class RunResult:
    """Outcome of a run: one result per step plus the final variables."""

    steps: list[StepResult] = field(default_factory=list)
    variables: dict[str, Any] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    aborted: bool = False
    abort_reason: str | None = None

    @property
    def success(self) -> bool:
        return not self.aborted and all(
            step.status is StepStatus.COMPLETED for step in self.steps
        )

    @property
    def failed_steps(self) -> list[StepResult]:
        return [step for step in self.steps if step.status is StepStatus.FAILED]

    @property
    def duration_ms(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "aborted": self.aborted,
            "abort_reason": self.abort_reason,
            "steps": [step.to_dict() for step in self.steps],
            "variables": dict(self.variables),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
        }
