"""Scenario running entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .suite_context import SuiteContext

ScenarioAction = Callable[["SuiteContext"], None]


class ScenarioStatus(str, Enum):
    """Lifecycle state of one scenario inside a suite run."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True)
class ScenarioStep:
    """Named scenario with the context keys it consumes and publishes."""

    name: str
    action: ScenarioAction
    requires: tuple[str, ...] = ()
    produces: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class ScenarioOutcome:
    """Progress of one scenario, rendered into the results workbook."""

    name: str
    status: ScenarioStatus
    started_at: datetime | None = None
    finished_at: datetime | None = None
    gas_used: int = 0
    error_message: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @staticmethod
    def pending(name: str) -> ScenarioOutcome:
        return ScenarioOutcome(name=name, status=ScenarioStatus.PENDING)

    @staticmethod
    def running(name: str, started_at: datetime) -> ScenarioOutcome:
        return ScenarioOutcome(name=name, status=ScenarioStatus.RUNNING, started_at=started_at)

    @staticmethod
    def passed(
        name: str, started_at: datetime, finished_at: datetime, gas_used: int
    ) -> ScenarioOutcome:
        return ScenarioOutcome(
            name=name,
            status=ScenarioStatus.PASSED,
            started_at=started_at,
            finished_at=finished_at,
            gas_used=gas_used,
        )

    @staticmethod
    def failed(
        name: str,
        started_at: datetime,
        finished_at: datetime,
        gas_used: int,
        error: BaseException,
    ) -> ScenarioOutcome:
        return ScenarioOutcome(
            name=name,
            status=ScenarioStatus.FAILED,
            started_at=started_at,
            finished_at=finished_at,
            gas_used=gas_used,
            error_message=f"{type(error).__name__}: {error}",
        )
