"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Suite configuration template for contract-e2e-tester.
# Replace every <REQUIRED> placeholder before running.
# Every other value shows the default used when the key is omitted.

network:
  endpoint: "http://localhost:1317"
  chain_id: "secretdev-1"
  denom: "uscrt"

faucet:
  url: "http://localhost:5000/faucet"
  # Smallest denomination unit (uscrt).
  target_balance: 100000000
  # The faucet is polled until funded or until one of these limits is hit.
  timeout_seconds: 300
  poll_interval_seconds: 1.0
  # max_attempts: 50
  request_timeout_seconds: 10

contracts:
  nft:
    # Relative paths resolve against this file's directory.
    wasm_path: "<REQUIRED>"
    label_prefix: "My contract"
    upload_gas_limit: 5000000
    instantiate_gas_limit: 1000000
    init_msg:
      name: "test_NFT"
      symbol: "token_symbol"
      entropy: "secret"
      config:
        public_token_supply: false
        public_owner: false
        enable_sealed_metadata: false
        unwrapped_metadata_is_private: true
        minter_may_update_metadata: true
        owner_may_update_metadata: false
        enable_burn: true
  provider:
    wasm_path: "<REQUIRED>"
    label_prefix: "My contract"
    # token_address and token_code_hash are added from the deployed NFT contract.
    init_msg:
      name: "test_NFT"
      symbol: "token_symbol"

scenarios:
  token_id: "001"
  viewing_key: "password"
  execute_gas_limit: 200000
"""


def build_placeholder_configuration() -> str:
    """Build a YAML suite configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder suite configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Suite configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
