"""Run execution domain exports."""

from .run_contracts import RunArtifacts, RunOutcome, RunRequest
from .suite_run_use_case import RunExecutionError, execute_contract_suite_run

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunArtifacts",
    "RunExecutionError",
    "execute_contract_suite_run",
]
