"""Contract upload and instantiation service."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from contract_e2e_tester.network_client.client_models import ClientContext, TxReceipt

from .deployment_models import DeployedContract

LOGGER = logging.getLogger(__name__)

CODE_ID_KEY = "code_id"
CONTRACT_ADDRESS_EVENT = "message"
CONTRACT_ADDRESS_KEY = "contract_address"


class UploadError(Exception):
    """Raised when contract bytecode could not be stored on chain."""


class InstantiateError(Exception):
    """Raised when an uploaded contract could not be instantiated."""


class MalformedReceiptError(Exception):
    """Raised when a successful receipt lacks the expected event attribute."""


def default_label_suffix() -> str:
    """Random suffix keeping instantiation labels unique across runs."""
    return str(math.ceil(random.random() * 10000))


def build_unique_label(label_prefix: str, suffix_factory: Callable[[], str]) -> str:
    return f"{label_prefix}{suffix_factory()}"


def extract_code_id(receipt: TxReceipt) -> int:
    """Return the `code_id` attribute of the first event of the first message log."""
    if not receipt.logs or not receipt.logs[0].events:
        raise MalformedReceiptError("Upload receipt does not contain any events.")
    raw_code_id = receipt.logs[0].events[0].attribute(CODE_ID_KEY)
    if raw_code_id is None:
        raise MalformedReceiptError(f"Upload receipt has no '{CODE_ID_KEY}' attribute.")
    try:
        code_id = int(raw_code_id)
    except ValueError as exc:
        raise MalformedReceiptError(
            f"Upload receipt code id is not an integer: {raw_code_id}"
        ) from exc
    if code_id <= 0:
        raise MalformedReceiptError(f"Upload receipt code id must be positive: {code_id}")
    return code_id


def extract_contract_address(receipt: TxReceipt) -> str:
    """Return the `message`/`contract_address` value from the flattened event log."""
    for entry in receipt.array_log():
        if entry.type == CONTRACT_ADDRESS_EVENT and entry.key == CONTRACT_ADDRESS_KEY:
            return entry.value
    raise MalformedReceiptError(
        f"Instantiate receipt has no '{CONTRACT_ADDRESS_EVENT}.{CONTRACT_ADDRESS_KEY}' entry."
    )


class ContractDeployer:
    """Upload bytecode and instantiate it for one wallet-bound client."""

    def __init__(
        self,
        context: ClientContext,
        *,
        label_suffix: Callable[[], str] | None = None,
    ) -> None:
        self._context = context
        self._label_suffix = label_suffix or default_label_suffix

    def deploy(
        self,
        wasm_path: Path | str,
        init_msg: Mapping[str, Any],
        *,
        label_prefix: str,
        upload_gas_limit: int,
        instantiate_gas_limit: int,
    ) -> DeployedContract:
        """Upload the wasm file at `wasm_path` and instantiate it with `init_msg`."""
        path = Path(wasm_path)
        try:
            wasm_byte_code = path.read_bytes()
        except OSError as exc:
            raise UploadError(f"Cannot read contract bytecode {path}: {exc}") from exc
        LOGGER.info("Uploading contract %s", path.name)
        code_id = self.upload(wasm_byte_code, gas_limit=upload_gas_limit)
        return self.instantiate(
            code_id,
            init_msg,
            label_prefix=label_prefix,
            gas_limit=instantiate_gas_limit,
        )

    def upload(self, wasm_byte_code: bytes, *, gas_limit: int) -> int:
        receipt = self._context.chain.upload_code(wasm_byte_code, gas_limit=gas_limit)
        if not receipt.succeeded:
            LOGGER.error("Failed to get code id: %s", receipt.raw_log)
            raise UploadError(f"Failed to upload contract: {receipt.raw_log}")
        code_id = extract_code_id(receipt)
        LOGGER.info("Contract codeId: %s", code_id)
        return code_id

    def instantiate(
        self,
        code_id: int,
        init_msg: Mapping[str, Any],
        *,
        label_prefix: str,
        gas_limit: int,
    ) -> DeployedContract:
        code_hash = self._context.chain.code_hash(code_id)
        LOGGER.info("Contract hash: %s", code_hash)
        label = build_unique_label(label_prefix, self._label_suffix)
        receipt = self._context.chain.instantiate(
            code_id, code_hash, init_msg, label, gas_limit=gas_limit
        )
        if not receipt.succeeded:
            raise InstantiateError(
                f"Failed to instantiate the contract with the following error {receipt.raw_log}"
            )
        address = extract_contract_address(receipt)
        LOGGER.info("Contract address: %s", address)
        return DeployedContract(code_id=code_id, code_hash=code_hash, address=address, label=label)
