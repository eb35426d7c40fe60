"""Contract invocation entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from contract_e2e_tester.network_client.client_models import LogEntry


@dataclass(frozen=True)
class TransactionResult:  # pylint: disable=too-many-instance-attributes
    """Decoded outcome of one confirmed execute transaction."""

    entry_point: str
    status_code: int
    raw_log: str
    events: tuple[LogEntry, ...]
    data: Any
    gas_used: int
    gas_limit: int
    tx_hash: str = ""

    def find_log_value(self, key: str, event_type: str | None = None) -> str | None:
        """Return the first flattened log value stored under `key`."""
        for entry in self.events:
            if entry.key == key and (event_type is None or entry.type == event_type):
                return entry.value
        return None
