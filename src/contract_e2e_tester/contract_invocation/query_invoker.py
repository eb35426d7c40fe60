"""Read-only contract query service."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_messages.metadata_models import PayloadShapeError
from contract_e2e_tester.contract_messages.tagged_variants import ContractPayload, render_payload
from contract_e2e_tester.network_client.chain_client import ChainQueryRejected
from contract_e2e_tester.network_client.client_models import ClientContext

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_DISCRIMINANTS = frozenset(
    {
        "generic_err",
        "unauthorized",
        "not_found",
        "parse_err",
        "serialize_err",
        "invalid_base64",
        "invalid_utf8",
        "overflow",
        "viewing_key_error",
        "err",
        "error",
    }
)


class QueryError(Exception):
    """Raised when a contract query returns an error answer or cannot be decoded."""


def is_error_response(response: Any) -> bool:
    """Return True for a `{<error discriminant>: ...}` answer."""
    if not isinstance(response, Mapping) or len(response) != 1:
        return False
    return next(iter(response)) in ERROR_DISCRIMINANTS


class QueryInvoker:
    """Submit read-only queries for one wallet-bound client."""

    def __init__(self, context: ClientContext) -> None:
        self._context = context

    def query(self, contract: DeployedContract, query: ContractPayload) -> Any:
        """Run `query` against `contract` and return the raw decoded answer."""
        payload = render_payload(query)
        entry_point = next(iter(payload))
        try:
            response = self._context.chain.query(contract.code_hash, contract.address, payload)
        except ChainQueryRejected as exc:
            raise QueryError(f"Query '{entry_point}' failed with the following err: {exc}") from exc
        if isinstance(response, str | bytes):
            response = _parse_json_answer(response, entry_point)
        if is_error_response(response):
            raise QueryError(
                f"Query '{entry_point}' failed with the following err: {json.dumps(response)}"
            )
        LOGGER.debug("%s answered %s", entry_point, response)
        return response

    def query_as(
        self,
        contract: DeployedContract,
        query: ContractPayload,
        decoder: Callable[[Any], T],
    ) -> T:
        """Run `query` and decode the answer into a typed value."""
        response = self.query(contract, query)
        try:
            return decoder(response)
        except PayloadShapeError as exc:
            raise QueryError(f"Unexpected answer shape: {exc}") from exc


def _parse_json_answer(raw: str | bytes, entry_point: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise QueryError(f"Query '{entry_point}' returned a non-JSON answer: {raw!r}") from exc
