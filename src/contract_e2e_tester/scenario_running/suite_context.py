"""Shared deployment state threaded through every scenario of a suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from contract_e2e_tester.contract_deployment.contract_deployer import ContractDeployer
from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_invocation.invocation_models import TransactionResult
from contract_e2e_tester.contract_invocation.query_invoker import QueryInvoker
from contract_e2e_tester.contract_invocation.transaction_invoker import TransactionInvoker
from contract_e2e_tester.network_client.client_models import ClientContext

CLIENT_KEY = "client"
NFT_CONTRACT_KEY = "nft_contract"
PROVIDER_CONTRACT_KEY = "provider_contract"


class MissingPrerequisiteError(Exception):
    """Raised when a scenario needs a context value no earlier step published."""


@dataclass
class SuiteContext:
    """Client, deployed contracts and artifacts published by earlier scenarios."""

    client: ClientContext
    nft_contract: DeployedContract
    provider_contract: DeployedContract
    artifacts: dict[str, Any] = field(default_factory=dict)
    transactions: list[TransactionResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.artifacts.setdefault(CLIENT_KEY, self.client)
        self.artifacts.setdefault(NFT_CONTRACT_KEY, self.nft_contract)
        self.artifacts.setdefault(PROVIDER_CONTRACT_KEY, self.provider_contract)

    def publish(self, key: str, value: Any) -> None:
        self.artifacts[key] = value

    def has(self, key: str) -> bool:
        return key in self.artifacts

    def require(self, key: str) -> Any:
        """Return the artifact stored under `key` or raise MissingPrerequisiteError."""
        if key not in self.artifacts:
            raise MissingPrerequisiteError(f"No earlier scenario published '{key}'.")
        return self.artifacts[key]

    def record(self, result: TransactionResult) -> TransactionResult:
        """Keep `result` for gas accounting and return it unchanged."""
        self.transactions.append(result)
        return result

    def transaction_invoker(self) -> TransactionInvoker:
        return TransactionInvoker(self.client)

    def query_invoker(self) -> QueryInvoker:
        return QueryInvoker(self.client)

    def deployer(self) -> ContractDeployer:
        return ContractDeployer(self.client)
