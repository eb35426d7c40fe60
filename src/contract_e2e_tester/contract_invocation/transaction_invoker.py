"""State-changing contract call service."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_messages.tagged_variants import ContractPayload, render_payload
from contract_e2e_tester.network_client.chain_client import Funds
from contract_e2e_tester.network_client.client_models import ClientContext

from .invocation_models import TransactionResult

LOGGER = logging.getLogger(__name__)

DEFAULT_EXECUTE_GAS_LIMIT = 200_000


class ExecutionError(Exception):
    """Raised when the chain rejects an execute transaction."""

    def __init__(self, message: str, raw_log: str = "") -> None:
        super().__init__(message)
        self.raw_log = raw_log


def decode_transaction_data(data: Sequence[bytes]) -> Any:
    """Decode the first data entry of a receipt as a UTF-8 JSON document."""
    if not data:
        return None
    try:
        return json.loads(data[0].decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ExecutionError(f"Transaction data is not a JSON document: {exc}") from exc


class TransactionInvoker:  # pylint: disable=too-few-public-methods
    """Submit execute messages for one wallet-bound client."""

    def __init__(self, context: ClientContext) -> None:
        self._context = context

    def execute(
        self,
        contract: DeployedContract,
        message: ContractPayload,
        *,
        gas_limit: int = DEFAULT_EXECUTE_GAS_LIMIT,
        funds: Funds = (),
    ) -> TransactionResult:
        """Execute `message` on `contract` and return the decoded result."""
        payload = render_payload(message)
        entry_point = next(iter(payload))
        receipt = self._context.chain.execute(
            contract.code_hash,
            contract.address,
            payload,
            gas_limit=gas_limit,
            funds=funds,
        )
        if not receipt.succeeded:
            raise ExecutionError(
                f"Execute '{entry_point}' on {contract.address} failed with code "
                f"{receipt.code}: {receipt.raw_log}",
                raw_log=receipt.raw_log,
            )
        result = TransactionResult(
            entry_point=entry_point,
            status_code=receipt.code,
            raw_log=receipt.raw_log,
            events=receipt.array_log(),
            data=decode_transaction_data(receipt.data),
            gas_used=receipt.gas_used,
            gas_limit=gas_limit,
            tx_hash=receipt.tx_hash,
        )
        LOGGER.debug("%s returned %s", entry_point, result.data)
        LOGGER.info("%s used %s gas", entry_point, result.gas_used)
        return result
