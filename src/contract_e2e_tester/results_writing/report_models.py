"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract


class ReportStatus(str, Enum):
    """Rendered status in the Scenarios sheet."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    NOT_RUN = "NOT_RUN"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class RunMetadata:  # pylint: disable=too-many-instance-attributes
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    config_path: Path
    output_path: Path
    endpoint: str
    chain_id: str
    dry_run: bool
    wallet_address: str | None = None
    nft_contract: DeployedContract | None = None
    provider_contract: DeployedContract | None = None
