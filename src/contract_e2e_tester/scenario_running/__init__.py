"""Scenario running exports."""

from .scenario_models import ScenarioAction, ScenarioOutcome, ScenarioStatus, ScenarioStep
from .scenario_runner import DuplicateScenarioError, ScenarioRunner, ensure_unique_names
from .suite_context import (
    CLIENT_KEY,
    NFT_CONTRACT_KEY,
    PROVIDER_CONTRACT_KEY,
    MissingPrerequisiteError,
    SuiteContext,
)

__all__ = [
    "ScenarioAction",
    "ScenarioOutcome",
    "ScenarioStatus",
    "ScenarioStep",
    "DuplicateScenarioError",
    "ScenarioRunner",
    "ensure_unique_names",
    "CLIENT_KEY",
    "NFT_CONTRACT_KEY",
    "PROVIDER_CONTRACT_KEY",
    "MissingPrerequisiteError",
    "SuiteContext",
]
