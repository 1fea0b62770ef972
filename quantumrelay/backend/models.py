"""Domain models for relay results and downstream contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import RelayError


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    body: str
    json: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class PlayerReward:
    player_id: str
    slot: Any
    placement: Any
    xp_earned: Any
    gold_earned: Any


@dataclass(frozen=True)
class RewardRecord:
    player_id: str
    key: str
    value: Any


class StepStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailureScope(str, Enum):
    # Surfaced to the webhook caller through the status code.
    CALLER = "caller"
    # Swallowed: visible in the logs only.
    LOGGED = "logged"


@dataclass(frozen=True)
class StepOutcome:
    step: str
    status: StepStatus
    detail: str = ""
    error: RelayError | None = None
    scope: FailureScope | None = None

    @classmethod
    def ok(cls, step: str, detail: str = "") -> "StepOutcome":
        return cls(step=step, status=StepStatus.OK, detail=detail)

    @classmethod
    def skipped(cls, step: str, detail: str) -> "StepOutcome":
        return cls(step=step, status=StepStatus.SKIPPED, detail=detail)

    @classmethod
    def logged_failure(cls, step: str, error: RelayError) -> "StepOutcome":
        return cls(step=step, status=StepStatus.FAILED, detail=str(error), error=error, scope=FailureScope.LOGGED)

    @classmethod
    def caller_failure(cls, step: str, error: RelayError) -> "StepOutcome":
        return cls(step=step, status=StepStatus.FAILED, detail=str(error), error=error, scope=FailureScope.CALLER)


@dataclass
class RelayReport:
    status_code: int = 200
    outcomes: list[StepOutcome] = field(default_factory=list)

    def add(self, outcome: StepOutcome) -> StepOutcome:
        self.outcomes.append(outcome)
        return outcome

    def step(self, name: str) -> list[StepOutcome]:
        return [outcome for outcome in self.outcomes if outcome.step == name]

    @property
    def swallowed(self) -> list[StepOutcome]:
        return [outcome for outcome in self.outcomes if outcome.scope is FailureScope.LOGGED]
