"""Ordered, fail-fast scenario runner."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from .scenario_models import ScenarioOutcome, ScenarioStep
from .suite_context import MissingPrerequisiteError, SuiteContext

LOGGER = logging.getLogger(__name__)


class DuplicateScenarioError(Exception):
    """Raised when two scenarios of one suite share a name."""


def ensure_unique_names(steps: Sequence[ScenarioStep]) -> None:
    counts = Counter(step.name for step in steps)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateScenarioError(f"Scenario names must be unique: {', '.join(duplicates)}")


class ScenarioRunner:
    """Run scenarios one after another against a shared SuiteContext.

    The first failing scenario is logged and its exception re-raised unchanged;
    the remaining scenarios stay pending. `outcomes` reflects progress at any
    point, so callers can still report a partial run.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self._order: list[str] = []
        self._outcomes: dict[str, ScenarioOutcome] = {}

    @property
    def outcomes(self) -> tuple[ScenarioOutcome, ...]:
        return tuple(self._outcomes[name] for name in self._order)

    def run(
        self, steps: Sequence[ScenarioStep], context: SuiteContext
    ) -> tuple[ScenarioOutcome, ...]:
        """Run `steps` in order and return their outcomes."""
        ensure_unique_names(steps)
        self._order = [step.name for step in steps]
        self._outcomes = {step.name: ScenarioOutcome.pending(step.name) for step in steps}
        for step in steps:
            self._run_step(step, context)
        return self.outcomes

    def _run_step(self, step: ScenarioStep, context: SuiteContext) -> None:
        started_at = self._clock()
        self._outcomes[step.name] = ScenarioOutcome.running(step.name, started_at)
        recorded_before = len(context.transactions)
        LOGGER.info("Testing %s", step.name)
        try:
            _check_keys(step, step.requires, context, "requires")
            step.action(context)
            _check_keys(step, step.produces, context, "did not publish")
        except Exception as exc:
            self._outcomes[step.name] = ScenarioOutcome.failed(
                step.name,
                started_at,
                self._clock(),
                _gas_since(context, recorded_before),
                exc,
            )
            LOGGER.error("[FAILED] %s: %s", step.name, exc)
            raise
        self._outcomes[step.name] = ScenarioOutcome.passed(
            step.name, started_at, self._clock(), _gas_since(context, recorded_before)
        )
        LOGGER.info("[SUCCESS] %s", step.name)


def _check_keys(
    step: ScenarioStep, keys: Sequence[str], context: SuiteContext, verb: str
) -> None:
    missing = [key for key in keys if not context.has(key)]
    if missing:
        raise MissingPrerequisiteError(f"Scenario '{step.name}' {verb}: {', '.join(missing)}")


def _gas_since(context: SuiteContext, recorded_before: int) -> int:
    return sum(result.gas_used for result in context.transactions[recorded_before:])
