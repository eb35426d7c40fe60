"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class NetworkSettings:
    """Chain endpoint the client binds to."""

    endpoint: str
    chain_id: str
    denom: str


@dataclass(frozen=True)
class FaucetSettings:
    """Devnet faucet polling configuration."""

    url: str
    target_balance: int
    timeout_seconds: float
    poll_interval_seconds: float
    max_attempts: int | None
    request_timeout_seconds: float


@dataclass(frozen=True)
class ContractSettings:
    """Upload and instantiation settings for one contract."""

    wasm_path: Path
    label_prefix: str
    upload_gas_limit: int
    instantiate_gas_limit: int
    init_msg: Mapping[str, Any]


@dataclass(frozen=True)
class ScenarioSettings:
    """Values shared by the NFT scenario suite."""

    token_id: str
    viewing_key: str
    execute_gas_limit: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    network: NetworkSettings
    faucet: FaucetSettings
    nft_contract: ContractSettings
    provider_contract: ContractSettings
    scenarios: ScenarioSettings
