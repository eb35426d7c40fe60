"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from contract_e2e_tester.configuration.runtime_settings import Configuration
from contract_e2e_tester.scenario_running.scenario_models import ScenarioStep


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one suite run."""

    config_path: str
    output_dir: str | None = None
    dry_run: bool = False


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    output_path: Path
    passed: int
    dry_run: bool


@dataclass(frozen=True)
class RunArtifacts:
    """Loaded configuration and the ordered suite it selects."""

    configuration: Configuration
    steps: tuple[ScenarioStep, ...]
