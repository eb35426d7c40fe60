"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    Configuration,
    ContractSettings,
    FaucetSettings,
    NetworkSettings,
    ScenarioSettings,
)

DEFAULT_ENDPOINT = "http://localhost:1317"
DEFAULT_CHAIN_ID = "secretdev-1"
DEFAULT_DENOM = "uscrt"
DEFAULT_FAUCET_URL = "http://localhost:5000/faucet"
DEFAULT_TARGET_BALANCE = 100_000_000
DEFAULT_LABEL_PREFIX = "My contract"
DEFAULT_UPLOAD_GAS_LIMIT = 5_000_000
DEFAULT_INSTANTIATE_GAS_LIMIT = 1_000_000
DEFAULT_EXECUTE_GAS_LIMIT = 200_000

_PROVIDER_RESERVED_INIT_KEYS = ("token_address", "token_code_hash")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    network = _parse_network_section(parsed.get("network") or {})
    faucet = _parse_faucet_section(parsed.get("faucet") or {})
    contracts = _require_mapping(parsed.get("contracts"), "contracts")
    nft_contract = _parse_contract_section(
        contracts.get("nft"), "contracts.nft", base_path=path.parent
    )
    provider_contract = _parse_contract_section(
        contracts.get("provider"), "contracts.provider", base_path=path.parent
    )
    for key in _PROVIDER_RESERVED_INIT_KEYS:
        if key in provider_contract.init_msg:
            raise ConfigurationError(
                f"contracts.provider.init_msg.{key} is filled from the deployed NFT contract."
            )
    scenarios = _parse_scenarios_section(parsed.get("scenarios") or {})

    return Configuration(
        path=path,
        network=network,
        faucet=faucet,
        nft_contract=nft_contract,
        provider_contract=provider_contract,
        scenarios=scenarios,
    )


def _parse_network_section(value: Any) -> NetworkSettings:
    section = _require_mapping(value, "network")
    endpoint = _require_non_empty_string(
        section.get("endpoint", DEFAULT_ENDPOINT), "network.endpoint"
    )
    chain_id = _require_non_empty_string(
        section.get("chain_id", DEFAULT_CHAIN_ID), "network.chain_id"
    )
    denom = _require_non_empty_string(section.get("denom", DEFAULT_DENOM), "network.denom")
    return NetworkSettings(endpoint=endpoint.rstrip("/"), chain_id=chain_id, denom=denom)


def _parse_faucet_section(value: Any) -> FaucetSettings:
    section = _require_mapping(value, "faucet")
    url = _require_non_empty_string(section.get("url", DEFAULT_FAUCET_URL), "faucet.url")
    target_balance = _require_non_negative_int(
        section.get("target_balance", DEFAULT_TARGET_BALANCE), "faucet.target_balance"
    )
    timeout_seconds = _require_positive_number(
        section.get("timeout_seconds", 300), "faucet.timeout_seconds"
    )
    poll_interval_seconds = _require_non_negative_number(
        section.get("poll_interval_seconds", 1.0), "faucet.poll_interval_seconds"
    )
    max_attempts_raw = section.get("max_attempts")
    max_attempts = (
        None
        if max_attempts_raw is None
        else _require_positive_int(max_attempts_raw, "faucet.max_attempts")
    )
    request_timeout_seconds = _require_positive_number(
        section.get("request_timeout_seconds", 10), "faucet.request_timeout_seconds"
    )
    return FaucetSettings(
        url=url,
        target_balance=target_balance,
        timeout_seconds=float(timeout_seconds),
        poll_interval_seconds=float(poll_interval_seconds),
        max_attempts=max_attempts,
        request_timeout_seconds=float(request_timeout_seconds),
    )


def _parse_contract_section(value: Any, section_name: str, *, base_path: Path) -> ContractSettings:
    section = _require_mapping(value, section_name)
    wasm_path = _resolve_path(
        base_path,
        _require_non_empty_string(section.get("wasm_path"), f"{section_name}.wasm_path"),
    )
    label_prefix = _require_non_empty_string(
        section.get("label_prefix", DEFAULT_LABEL_PREFIX), f"{section_name}.label_prefix"
    )
    upload_gas_limit = _require_positive_int(
        section.get("upload_gas_limit", DEFAULT_UPLOAD_GAS_LIMIT),
        f"{section_name}.upload_gas_limit",
    )
    instantiate_gas_limit = _require_positive_int(
        section.get("instantiate_gas_limit", DEFAULT_INSTANTIATE_GAS_LIMIT),
        f"{section_name}.instantiate_gas_limit",
    )
    init_msg = section.get("init_msg") or {}
    if not isinstance(init_msg, Mapping):
        raise ConfigurationError(f"{section_name}.init_msg must be a mapping.")
    return ContractSettings(
        wasm_path=wasm_path,
        label_prefix=label_prefix,
        upload_gas_limit=upload_gas_limit,
        instantiate_gas_limit=instantiate_gas_limit,
        init_msg=dict(init_msg),
    )


def _parse_scenarios_section(value: Any) -> ScenarioSettings:
    section = _require_mapping(value, "scenarios")
    token_id = _require_non_empty_string(section.get("token_id", "001"), "scenarios.token_id")
    viewing_key = _require_non_empty_string(
        section.get("viewing_key", "password"), "scenarios.viewing_key"
    )
    execute_gas_limit = _require_positive_int(
        section.get("execute_gas_limit", DEFAULT_EXECUTE_GAS_LIMIT),
        "scenarios.execute_gas_limit",
    )
    return ScenarioSettings(
        token_id=token_id,
        viewing_key=viewing_key,
        execute_gas_limit=execute_gas_limit,
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_non_negative_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return number


def _require_number(value: Any, field_name: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{field_name} must be a number.")
    return value


def _require_positive_number(value: Any, field_name: str) -> int | float:
    number = _require_number(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_non_negative_number(value: Any, field_name: str) -> int | float:
    number = _require_number(value, field_name)
    if number < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return number
