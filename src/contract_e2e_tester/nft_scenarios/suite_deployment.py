"""Deployment order of the contracts the NFT suite runs against."""

from __future__ import annotations

from contract_e2e_tester.configuration.runtime_settings import ContractSettings
from contract_e2e_tester.contract_deployment.contract_deployer import ContractDeployer
from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_messages.provider_messages import ProviderInstantiate


def deploy_nft_contract(deployer: ContractDeployer, settings: ContractSettings) -> DeployedContract:
    return deployer.deploy(
        settings.wasm_path,
        settings.init_msg,
        label_prefix=settings.label_prefix,
        upload_gas_limit=settings.upload_gas_limit,
        instantiate_gas_limit=settings.instantiate_gas_limit,
    )


def deploy_provider_contract(
    deployer: ContractDeployer, settings: ContractSettings, nft_contract: DeployedContract
) -> DeployedContract:
    """Deploy a provider whose init payload points at `nft_contract`."""
    init_msg = ProviderInstantiate.from_settings(
        settings.init_msg,
        token_address=nft_contract.address,
        token_code_hash=nft_contract.code_hash,
    )
    return deployer.deploy(
        settings.wasm_path,
        init_msg.to_payload(),
        label_prefix=settings.label_prefix,
        upload_gas_limit=settings.upload_gas_limit,
        instantiate_gas_limit=settings.instantiate_gas_limit,
    )


def deploy_suite_contracts(
    deployer: ContractDeployer,
    nft_settings: ContractSettings,
    provider_settings: ContractSettings,
) -> tuple[DeployedContract, DeployedContract]:
    """Deploy the NFT contract, then the provider that references it."""
    nft_contract = deploy_nft_contract(deployer, nft_settings)
    provider_contract = deploy_provider_contract(deployer, provider_settings, nft_contract)
    return nft_contract, provider_contract
