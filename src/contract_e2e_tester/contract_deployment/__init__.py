"""Contract deployment exports."""

from .contract_deployer import (
    ContractDeployer,
    InstantiateError,
    MalformedReceiptError,
    UploadError,
    build_unique_label,
    extract_code_id,
    extract_contract_address,
)
from .deployment_models import DeployedContract

__all__ = [
    "ContractDeployer",
    "DeployedContract",
    "InstantiateError",
    "MalformedReceiptError",
    "UploadError",
    "build_unique_label",
    "extract_code_id",
    "extract_contract_address",
]
