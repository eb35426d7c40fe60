"""Contract deployment entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeployedContract:
    """Instantiated contract identity used to route calls."""

    code_id: int
    code_hash: str
    address: str
    label: str
