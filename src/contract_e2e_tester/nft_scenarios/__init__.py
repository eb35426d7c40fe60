"""NFT scenario suite exports."""

from .nft_operations import ScenarioCheckError
from .scenario_suite import build_nft_suite
from .suite_deployment import (
    deploy_nft_contract,
    deploy_provider_contract,
    deploy_suite_contracts,
)

__all__ = [
    "ScenarioCheckError",
    "build_nft_suite",
    "deploy_nft_contract",
    "deploy_provider_contract",
    "deploy_suite_contracts",
]
