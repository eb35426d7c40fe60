"""Network client entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .chain_client import ChainClient


@dataclass(frozen=True)
class TxEvent:
    """One typed event emitted by a transaction message."""

    type: str
    attributes: tuple[tuple[str, str], ...]

    def attribute(self, key: str) -> str | None:
        """Return the first attribute value stored under `key`."""
        for attribute_key, value in self.attributes:
            if attribute_key == key:
                return value
        return None


@dataclass(frozen=True)
class TxLog:
    """Structured log of one message inside a transaction."""

    msg_index: int
    events: tuple[TxEvent, ...]


@dataclass(frozen=True)
class LogEntry:
    """Flattened `(type, key, value)` view of one event attribute."""

    msg_index: int
    type: str
    key: str
    value: str


@dataclass(frozen=True)
class TxReceipt:  # pylint: disable=too-many-instance-attributes
    """Broadcast outcome returned by the chain client."""

    code: int
    raw_log: str
    logs: tuple[TxLog, ...] = ()
    data: tuple[bytes, ...] = ()
    gas_used: int = 0
    gas_wanted: int = 0
    tx_hash: str = ""

    @property
    def succeeded(self) -> bool:
        """Return True when the chain accepted the transaction."""
        return self.code == 0

    def array_log(self) -> tuple[LogEntry, ...]:
        """Flatten every event attribute of every message log."""
        return tuple(
            LogEntry(msg_index=log.msg_index, type=event.type, key=key, value=value)
            for log in self.logs
            for event in log.events
            for key, value in event.attributes
        )


@dataclass(frozen=True)
class ClientContext:
    """Wallet-bound connection to one chain endpoint.

    The signing key material stays inside `chain`; the context only exposes the
    derived address.
    """

    address: str
    endpoint: str
    chain_id: str
    chain: ChainClient = field(repr=False, compare=False)


def build_tx_events(raw_events: Sequence[object]) -> tuple[TxEvent, ...]:
    """Normalize SDK/JSON event dicts (`{"type", "attributes": [{"key", "value"}]}`)."""
    events: list[TxEvent] = []
    for raw_event in raw_events:
        if not isinstance(raw_event, dict):
            continue
        attributes = tuple(
            (str(attribute.get("key", "")), str(attribute.get("value", "")))
            for attribute in raw_event.get("attributes") or ()
            if isinstance(attribute, dict)
        )
        events.append(TxEvent(type=str(raw_event.get("type", "")), attributes=attributes))
    return tuple(events)
