"""Chain client boundary used by deployment, invocation and faucet services."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from contract_e2e_tester.configuration.runtime_settings import NetworkSettings

from .client_models import ClientContext, TxReceipt

Funds = Sequence[tuple[int, str]]


class ClientConnectionError(Exception):
    """Raised when a client cannot be bound to the configured endpoint."""


class ChainQueryRejected(Exception):
    """Raised by a chain client when the node rejects a contract query."""


class ChainRequestError(Exception):
    """Raised when the node cannot be reached or a transaction never lands."""


class ChainClient(Protocol):
    """Protocol implemented by both the SDK adapter and test fakes."""

    def upload_code(self, wasm_byte_code: bytes, *, gas_limit: int) -> TxReceipt: ...

    def code_hash(self, code_id: int) -> str: ...

    def instantiate(
        self,
        code_id: int,
        code_hash: str,
        init_msg: Mapping[str, Any],
        label: str,
        *,
        gas_limit: int,
    ) -> TxReceipt: ...

    def execute(
        self,
        contract_hash: str,
        contract_address: str,
        msg: Mapping[str, Any],
        *,
        gas_limit: int,
        funds: Funds = (),
    ) -> TxReceipt: ...

    def query(
        self, contract_hash: str, contract_address: str, query: Mapping[str, Any]
    ) -> Any: ...

    def balance(self, address: str, denom: str) -> int: ...


ClientFactory = Callable[[NetworkSettings], ClientContext]
