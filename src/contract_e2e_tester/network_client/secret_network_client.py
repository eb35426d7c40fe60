"""Secret Network chain client backed by secret-sdk."""

from __future__ import annotations

import base64
import json
import logging
import re
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import aiohttp
from secret_sdk.client.lcd import LCDClient
from secret_sdk.core.coins import Coins
from secret_sdk.core.wasm import MsgInstantiateContract, MsgStoreCode
from secret_sdk.exceptions import LCDResponseError
from secret_sdk.key.mnemonic import MnemonicKey

from contract_e2e_tester.configuration.runtime_settings import NetworkSettings

from .chain_client import ChainQueryRejected, ChainRequestError, ClientConnectionError, Funds
from .client_models import ClientContext, TxEvent, TxLog, TxReceipt, build_tx_events

LOGGER = logging.getLogger(__name__)

TX_POLL_INTERVAL_SECONDS = 1.0
TX_INCLUSION_TIMEOUT_SECONDS = 60.0

_NODE_ERRORS = (LCDResponseError, aiohttp.ClientError, TimeoutError)
_CHECK_TX_FAILURE = re.compile(r"failed with code (\d+)")


class SecretNetworkClient:
    """`ChainClient` implementation signing with a freshly generated mnemonic key.

    Transactions are broadcast in sync mode and then polled until the node
    reports them included, so receipts carry the delivered logs, data and gas.
    CheckTx rejections come back as failed receipts; unreachable or misbehaving
    nodes raise `ChainRequestError`.
    """

    def __init__(
        self,
        lcd: LCDClient,
        key: MnemonicKey,
        *,
        poll_interval_seconds: float = TX_POLL_INTERVAL_SECONDS,
        inclusion_timeout_seconds: float = TX_INCLUSION_TIMEOUT_SECONDS,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._lcd = lcd
        self._wallet = lcd.wallet(key)
        self.address: str = key.acc_address
        self._poll_interval_seconds = poll_interval_seconds
        self._inclusion_timeout_seconds = inclusion_timeout_seconds
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep

    def upload_code(self, wasm_byte_code: bytes, *, gas_limit: int) -> TxReceipt:
        message = MsgStoreCode(
            sender=self.address,
            wasm_byte_code=wasm_byte_code,
            source="",
            builder="",
        )
        return self._broadcast(message, gas_limit)

    def code_hash(self, code_id: int) -> str:
        with _node_errors(f"code hash lookup for code id {code_id}"):
            response = self._lcd.wasm.code_hash_by_code_id(code_id)
        return str(response["code_hash"])

    def instantiate(
        self,
        code_id: int,
        code_hash: str,
        init_msg: Mapping[str, Any],
        label: str,
        *,
        gas_limit: int,
    ) -> TxReceipt:
        message = MsgInstantiateContract(
            sender=self.address,
            code_id=code_id,
            code_hash=code_hash,
            init_msg=dict(init_msg),
            label=label,
            encryption_utils=self._lcd.encrypt_utils,
        )
        return self._broadcast(message, gas_limit)

    def execute(
        self,
        contract_hash: str,
        contract_address: str,
        msg: Mapping[str, Any],
        *,
        gas_limit: int,
        funds: Funds = (),
    ) -> TxReceipt:
        transfer_amount = Coins({denom: amount for amount, denom in funds}) if funds else None
        with _node_errors(f"execute message for {contract_address}"):
            message = self._lcd.wasm.contract_execute_msg(
                self.address,
                contract_address,
                dict(msg),
                transfer_amount,
                contract_code_hash=contract_hash,
            )
        return self._broadcast(message, gas_limit)

    def query(self, contract_hash: str, contract_address: str, query: Mapping[str, Any]) -> Any:
        try:
            return self._lcd.wasm.contract_query(
                contract_address, dict(query), contract_code_hash=contract_hash
            )
        except LCDResponseError as exc:
            raise ChainQueryRejected(str(exc)) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ChainRequestError(f"query of {contract_address} failed: {exc}") from exc

    def balance(self, address: str, denom: str) -> int:
        with _node_errors(f"balance lookup for {address}"):
            coins, _pagination = self._lcd.bank.balance(address)
        coin = coins.get(denom)
        return int(coin.amount) if coin is not None else 0

    def _broadcast(self, message: Any, gas_limit: int) -> TxReceipt:
        try:
            result = self._wallet.create_and_broadcast_tx(msg_list=[message], gas=gas_limit)
        except _NODE_ERRORS as exc:
            raise ChainRequestError(f"broadcast failed: {exc}") from exc
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # secret-sdk reports a CheckTx rejection as a plain Exception.
            rejected = _CHECK_TX_FAILURE.search(str(exc))
            if rejected is None:
                raise ChainRequestError(f"broadcast failed: {exc}") from exc
            return TxReceipt(code=int(rejected.group(1)), raw_log=str(exc))
        if result.code:
            return TxReceipt(
                code=int(result.code),
                raw_log=str(result.raw_log or ""),
                tx_hash=str(result.txhash),
            )
        return self._wait_for_inclusion(str(result.txhash))

    def _wait_for_inclusion(self, tx_hash: str) -> TxReceipt:
        deadline = self._clock() + self._inclusion_timeout_seconds
        while True:
            try:
                tx_info = self._lcd.tx.tx_info(tx_hash)
            except _NODE_ERRORS as exc:
                if self._clock() >= deadline:
                    raise ChainRequestError(
                        f"Transaction {tx_hash} was not included within "
                        f"{self._inclusion_timeout_seconds}s: {exc}"
                    ) from exc
                LOGGER.debug("Waiting for transaction %s: %s", tx_hash, exc)
                self._sleep(self._poll_interval_seconds)
                continue
            return _to_receipt(tx_info)


def connect_secret_network_client(network: NetworkSettings) -> ClientContext:
    """Generate a random wallet and bind it to the configured LCD endpoint."""
    try:
        lcd = LCDClient(url=network.endpoint, chain_id=network.chain_id)
        lcd.tendermint.node_info()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ClientConnectionError(
            f"Cannot connect to {network.endpoint} ({network.chain_id}): {exc}"
        ) from exc
    client = SecretNetworkClient(lcd, MnemonicKey())
    LOGGER.info("Initialized client with wallet address: %s", client.address)
    return ClientContext(
        address=client.address,
        endpoint=network.endpoint,
        chain_id=network.chain_id,
        chain=client,
    )


@contextmanager
def _node_errors(action: str) -> Iterator[None]:
    try:
        yield
    except _NODE_ERRORS as exc:
        raise ChainRequestError(f"{action} failed: {exc}") from exc


def _to_receipt(tx_info: Any) -> TxReceipt:
    raw_log = getattr(tx_info, "rawlog", None) or getattr(tx_info, "raw_log", None) or ""
    return TxReceipt(
        code=int(getattr(tx_info, "code", 0) or 0),
        raw_log=str(raw_log),
        logs=_tx_logs(getattr(tx_info, "logs", None)),
        data=_normalize_data(getattr(tx_info, "data", None)),
        gas_used=int(getattr(tx_info, "gas_used", 0) or 0),
        gas_wanted=int(getattr(tx_info, "gas_wanted", 0) or 0),
        tx_hash=str(getattr(tx_info, "txhash", "") or ""),
    )


def _tx_logs(raw_logs: Any) -> tuple[TxLog, ...]:
    """Accept SDK `TxLog` objects, `{msg_index, events}` dicts or flat array-log entries."""
    if raw_logs is None:
        return ()
    if not isinstance(raw_logs, Sequence) or isinstance(raw_logs, str):
        raw_logs = [raw_logs]
    logs: list[TxLog] = []
    flattened: dict[int, dict[str, list[tuple[str, str]]]] = {}
    for index, raw_log in enumerate(raw_logs):
        if isinstance(raw_log, Mapping) and "key" in raw_log:
            events = flattened.setdefault(int(raw_log.get("msg", 0)), {})
            events.setdefault(str(raw_log.get("type", "")), []).append(
                (str(raw_log["key"]), str(raw_log.get("value", "")))
            )
        elif isinstance(raw_log, Mapping):
            logs.append(
                TxLog(
                    msg_index=int(raw_log.get("msg_index", index) or 0),
                    events=build_tx_events(raw_log.get("events") or ()),
                )
            )
        else:
            logs.append(
                TxLog(
                    msg_index=int(getattr(raw_log, "msg_index", index) or 0),
                    events=build_tx_events(getattr(raw_log, "events", None) or ()),
                )
            )
    for msg_index, events in sorted(flattened.items()):
        logs.append(
            TxLog(
                msg_index=msg_index,
                events=tuple(
                    TxEvent(type=event_type, attributes=tuple(attributes))
                    for event_type, attributes in events.items()
                ),
            )
        )
    return tuple(logs)


def _normalize_data(raw: Any) -> tuple[bytes, ...]:
    if raw is None:
        return ()
    entries = raw if isinstance(raw, list | tuple) else [raw]
    normalized: list[bytes] = []
    for entry in entries:
        if isinstance(entry, bytes | bytearray):
            normalized.append(bytes(entry))
        elif isinstance(entry, str):
            normalized.append(_decode_text_data(entry))
        elif isinstance(getattr(entry, "data", None), bytes):
            # Decrypted Msg*Response protobufs carry the contract answer in `data`.
            normalized.append(entry.data)
        elif isinstance(entry, Mapping):
            normalized.append(json.dumps(entry).encode("utf-8"))
    return tuple(normalized)


def _decode_text_data(entry: str) -> bytes:
    stripped = entry.strip()
    if stripped.startswith(("{", "[")):
        return stripped.encode("utf-8")
    try:
        return base64.b64decode(stripped, validate=True)
    except ValueError:
        return stripped.encode("utf-8")
