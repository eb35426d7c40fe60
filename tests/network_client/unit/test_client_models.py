"""Network client entity tests."""

from __future__ import annotations

from contract_e2e_tester.network_client.client_models import (
    ClientContext,
    LogEntry,
    TxEvent,
    TxLog,
    TxReceipt,
    build_tx_events,
)


def test_build_tx_events_normalizes_sdk_event_dicts() -> None:
    events = build_tx_events(
        [
            {"type": "message", "attributes": [{"key": "code_id", "value": 7}]},
            "not-an-event",
            {"type": "wasm", "attributes": None},
        ]
    )

    assert events == (
        TxEvent(type="message", attributes=(("code_id", "7"),)),
        TxEvent(type="wasm", attributes=()),
    )
    assert events[0].attribute("code_id") == "7"
    assert events[0].attribute("missing") is None


def test_array_log_flattens_every_attribute_in_order() -> None:
    receipt = TxReceipt(
        code=0,
        raw_log="",
        logs=(
            TxLog(
                msg_index=0,
                events=(
                    TxEvent("message", (("action", "instantiate"), ("contract_address", "s1"))),
                    TxEvent("wasm", (("minted", "001"),)),
                ),
            ),
        ),
    )

    assert receipt.succeeded is True
    assert receipt.array_log() == (
        LogEntry(0, "message", "action", "instantiate"),
        LogEntry(0, "message", "contract_address", "s1"),
        LogEntry(0, "wasm", "minted", "001"),
    )


def test_non_zero_code_is_not_succeeded() -> None:
    assert TxReceipt(code=5, raw_log="out of gas").succeeded is False


def test_client_context_hides_chain_client_from_repr_and_equality() -> None:
    first = ClientContext("secret1abc", "http://localhost:1317", "secretdev-1", chain=object())
    second = ClientContext("secret1abc", "http://localhost:1317", "secretdev-1", chain=object())

    assert first == second
    assert "chain=" not in repr(first)
