"""NFT suite integration tests against an in-memory devnet."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path

import pytest
from contract_e2e_tester.configuration.runtime_settings import ContractSettings, ScenarioSettings
from contract_e2e_tester.contract_deployment.contract_deployer import ContractDeployer
from contract_e2e_tester.contract_invocation.query_invoker import QueryError
from contract_e2e_tester.contract_invocation.transaction_invoker import ExecutionError
from contract_e2e_tester.contract_messages.metadata_models import Extension, Metadata
from contract_e2e_tester.network_client.chain_client import ChainQueryRejected
from contract_e2e_tester.network_client.client_models import (
    ClientContext,
    TxEvent,
    TxLog,
    TxReceipt,
)
from contract_e2e_tester.nft_scenarios import (
    build_nft_suite,
    deploy_suite_contracts,
    nft_operations,
)
from contract_e2e_tester.scenario_running.scenario_models import ScenarioStatus
from contract_e2e_tester.scenario_running.scenario_runner import ScenarioRunner
from contract_e2e_tester.scenario_running.suite_context import SuiteContext

WALLET = "secret1wallet"
GAS_USED = 50_000


class _NftState:
    def __init__(self, init_msg: dict) -> None:
        self.init_msg = init_msg
        self.public: dict[str, dict] = {}
        self.private: dict[str, dict] = {}
        self.viewing_keys: dict[str, str] = {}
        self.providers: list[str] = []


class _ProviderState:
    def __init__(self, init_msg: dict) -> None:
        self.init_msg = init_msg
        self.admin = WALLET
        self.public: dict[int, dict] = {}
        self.private: dict[int, dict] = {}
        self.viewing_keys: dict[str, str] = {}


class _InMemoryDevnet:
    """Executes the NFT and provider contract messages the suite sends."""

    def __init__(self, *, reject_entry_points: tuple[str, ...] = ()) -> None:
        self.codes: dict[int, bytes] = {}
        self.contracts: dict[str, tuple[str, _NftState | _ProviderState]] = {}
        self.instantiations: list[tuple[str, dict]] = []
        self.reject_entry_points = reject_entry_points

    def upload_code(self, wasm_byte_code: bytes, *, gas_limit: int) -> TxReceipt:
        code_id = len(self.codes) + 1
        self.codes[code_id] = wasm_byte_code
        return _receipt(TxEvent("message", (("code_id", str(code_id)),)))

    def code_hash(self, code_id: int) -> str:
        return hashlib.sha256(self.codes[code_id]).hexdigest()

    def instantiate(self, code_id, code_hash, init_msg, label, *, gas_limit) -> TxReceipt:
        assert code_hash == self.code_hash(code_id)
        address = f"secret1contract{len(self.contracts) + 1}"
        kind = self.codes[code_id].decode("utf-8")
        state = _NftState(dict(init_msg)) if kind == "nft" else _ProviderState(dict(init_msg))
        self.contracts[address] = (code_hash, state)
        self.instantiations.append((kind, dict(init_msg)))
        return _receipt(TxEvent("message", (("contract_address", address),)))

    def execute(self, contract_hash, contract_address, msg, *, gas_limit, funds=()) -> TxReceipt:
        state = self._contract(contract_hash, contract_address)
        entry_point, body = next(iter(msg.items()))
        if entry_point in self.reject_entry_points:
            return TxReceipt(code=3, raw_log=f"{entry_point} rejected", gas_used=GAS_USED)
        if isinstance(state, _NftState):
            return self._execute_nft(state, entry_point, body)
        return self._execute_provider(state, entry_point, body)

    def query(self, contract_hash, contract_address, query):
        state = self._contract(contract_hash, contract_address)
        entry_point, body = next(iter(query.items()))
        if isinstance(state, _ProviderState):
            return self._query_provider(state, entry_point, body)
        token_id = body["token_id"]
        if token_id not in state.public:
            return {"generic_err": {"msg": f"Token ID: {token_id} not found"}}
        viewer = body.get("viewer")
        if viewer is not None and state.viewing_keys.get(viewer["address"]) != viewer.get(
            "viewing_key"
        ):
            return {"generic_err": {"msg": "Wrong viewing key for this address"}}
        if entry_point == "nft_info":
            return {"nft_info": state.public[token_id]}
        if entry_point == "private_metadata":
            if viewer is None:
                return {"unauthorized": {}}
            return {"private_metadata": state.private[token_id]}
        if entry_point == "provider_metadata":
            entries = [
                self._provider_state(address).public.get(0, {})
                for address in state.providers
            ]
            return {"provider_metadata": {"metadata": entries}}
        return {"parse_err": {"msg": f"unknown variant {entry_point}"}}

    def balance(self, address: str, denom: str) -> int:
        return 100_000_000

    def _execute_nft(self, state: _NftState, entry_point: str, body: dict) -> TxReceipt:
        if entry_point == "mint_nft":
            state.public[body["token_id"]] = body.get("public_metadata", {})
            state.private[body["token_id"]] = body.get("private_metadata", {})
            return _receipt(data={"mint_nft": {"token_id": body["token_id"]}})
        if entry_point == "register_metadata_provider":
            state.providers.append(body["address"])
            return _receipt(TxEvent("wasm", (("register_provider", body["address"]),)))
        if entry_point == "set_metadata":
            if "public_metadata" in body:
                state.public[body["token_id"]] = body["public_metadata"]
            if "private_metadata" in body:
                state.private[body["token_id"]] = body["private_metadata"]
            return _receipt(data={"set_metadata": {"status": "success"}})
        if entry_point == "set_viewing_key":
            state.viewing_keys[WALLET] = body["key"]
            return _receipt(data={"viewing_key": {"key": body["key"]}})
        return TxReceipt(code=2, raw_log=f"unknown variant {entry_point}")

    def _execute_provider(self, state: _ProviderState, entry_point: str, body: dict) -> TxReceipt:
        if entry_point == "set_metadata":
            if "public_metadata" in body:
                state.public[body["idx"]] = body["public_metadata"]
            if "private_metadata" in body:
                state.private[body["idx"]] = body["private_metadata"]
            return _receipt(data={"set_metadata": {"status": "success"}})
        if entry_point == "create_viewing_key":
            key = "api_key_" + hashlib.sha256(body["entropy"].encode("utf-8")).hexdigest()[:16]
            state.viewing_keys[WALLET] = key
            return _receipt(data={"viewing_key": {"key": key}})
        if entry_point == "set_viewing_key":
            state.viewing_keys[WALLET] = body["key"]
            return _receipt(data={"viewing_key": {"key": body["key"]}})
        if entry_point == "change_admin":
            if state.admin != WALLET:
                return TxReceipt(
                    code=4,
                    raw_log="This is an admin command and can only be run from the admin address",
                    gas_used=GAS_USED,
                )
            state.admin = body["address"]
            return _receipt(data={"change_admin": {"status": "success"}})
        return TxReceipt(code=2, raw_log=f"unknown variant {entry_point}")

    def _query_provider(self, state: _ProviderState, entry_point: str, body: dict):
        if entry_point == "nft_info":
            return {"nft_info": state.public.get(body["token_idx"], {})}
        if entry_point == "private_metadata":
            return {"private_metadata": {}}
        return {"parse_err": {"msg": f"unknown variant {entry_point}"}}

    def _contract(self, contract_hash: str, contract_address: str):
        if contract_address not in self.contracts:
            raise ChainQueryRejected(f"contract {contract_address} not found")
        stored_hash, state = self.contracts[contract_address]
        assert stored_hash == contract_hash
        return state

    def _provider_state(self, address: str) -> _ProviderState:
        state = self.contracts[address][1]
        assert isinstance(state, _ProviderState)
        return state


def _receipt(*events: TxEvent, data: dict | None = None) -> TxReceipt:
    return TxReceipt(
        code=0,
        raw_log="",
        logs=(TxLog(0, events),) if events else (),
        data=(json.dumps(data).encode("utf-8"),) if data is not None else (),
        gas_used=GAS_USED,
    )


def _contract_settings(tmp_path: Path, kind: str, init_msg: dict) -> ContractSettings:
    wasm_path = tmp_path / f"{kind}.wasm"
    wasm_path.write_bytes(kind.encode("utf-8"))
    return ContractSettings(
        wasm_path=wasm_path,
        label_prefix=f"{kind}-",
        upload_gas_limit=5_000_000,
        instantiate_gas_limit=1_000_000,
        init_msg=init_msg,
    )


def _deployed_suite(tmp_path: Path, chain: _InMemoryDevnet):
    client = ClientContext(WALLET, "http://localhost:1317", "secretdev-1", chain=chain)
    provider_settings = _contract_settings(tmp_path, "provider", {"name": "test_NFT"})
    nft_contract, provider_contract = deploy_suite_contracts(
        ContractDeployer(client),
        _contract_settings(tmp_path, "nft", {"name": "test_NFT", "symbol": "token_symbol"}),
        provider_settings,
    )
    context = SuiteContext(
        client=client, nft_contract=nft_contract, provider_contract=provider_contract
    )
    return context, provider_settings


SCENARIO_SETTINGS = ScenarioSettings(
    token_id="001", viewing_key="password", execute_gas_limit=200_000
)


def test_full_suite_passes_in_order(tmp_path: Path, caplog) -> None:
    chain = _InMemoryDevnet()
    context, provider_settings = _deployed_suite(tmp_path, chain)
    steps = build_nft_suite(SCENARIO_SETTINGS, provider_settings)

    with caplog.at_level(logging.INFO):
        outcomes = ScenarioRunner().run(steps, context)

    assert [outcome.name for outcome in outcomes] == [
        "mint",
        "register_provider",
        "set_metadata",
        "query_metadata",
        "batch_provider_metadata",
        "provider_contract",
        "gas_limits",
    ]
    assert all(outcome.status is ScenarioStatus.PASSED for outcome in outcomes)
    assert outcomes[0].gas_used == GAS_USED
    for step in steps:
        assert f"[SUCCESS] {step.name}" in caplog.text
    assert "Registered Provider address is: secret1contract2" in caplog.text


def test_provider_init_embeds_nft_address_and_code_hash(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)

    (nft_kind, _), (provider_kind, provider_init) = chain.instantiations
    assert (nft_kind, provider_kind) == ("nft", "provider")
    assert provider_init["token_address"] == context.nft_contract.address
    assert provider_init["token_code_hash"] == context.nft_contract.code_hash
    assert context.nft_contract.code_id > 0
    assert context.nft_contract.label.startswith("nft-")


def test_minted_token_metadata_is_returned_by_nft_info(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)
    public = Metadata(extension=Extension(name="test name", description="hello world"))

    nft_operations.mint_token(context, "007", gas_limit=200_000)
    nft_operations.set_token_metadata(
        context, "007", public, Metadata(extension=Extension(name="p")), gas_limit=200_000
    )

    assert nft_operations.query_nft_info(context, "007") == public


def test_private_metadata_requires_the_viewing_key_that_was_set(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)
    private = Metadata(extension=Extension(name="private name"))
    nft_operations.mint_token(context, "001", gas_limit=200_000)
    nft_operations.set_token_metadata(context, "001", private, private, gas_limit=200_000)
    nft_operations.set_viewing_key(context, "password", gas_limit=200_000)

    assert nft_operations.query_private_metadata(context, "001", "password") == private
    with pytest.raises(QueryError, match="Wrong viewing key"):
        nft_operations.query_private_metadata(context, "001", "not-password")


def test_rejected_registration_aborts_remaining_scenarios(tmp_path: Path) -> None:
    chain = _InMemoryDevnet(reject_entry_points=("register_metadata_provider",))
    context, provider_settings = _deployed_suite(tmp_path, chain)
    runner = ScenarioRunner()

    with pytest.raises(Exception, match="register_metadata_provider rejected"):
        runner.run(build_nft_suite(SCENARIO_SETTINGS, provider_settings), context)

    statuses = [outcome.status for outcome in runner.outcomes]
    assert statuses == [
        ScenarioStatus.PASSED,
        ScenarioStatus.FAILED,
        ScenarioStatus.PENDING,
        ScenarioStatus.PENDING,
        ScenarioStatus.PENDING,
        ScenarioStatus.PENDING,
        ScenarioStatus.PENDING,
    ]


def test_batch_query_lists_providers_in_registration_order(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, provider_settings = _deployed_suite(tmp_path, chain)
    ScenarioRunner().run(build_nft_suite(SCENARIO_SETTINGS, provider_settings), context)

    entries = nft_operations.query_provider_metadata(context, "001", "password")

    assert [entry.extension.name for entry in entries] == ["provider 0", "provider 1"]
    nft_state = chain.contracts[context.nft_contract.address][1]
    assert nft_state.providers[0] == context.provider_contract.address


def test_provider_nft_info_round_trips_metadata_by_index(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)
    provider = context.provider_contract
    metadata = Metadata(extension=Extension(name="indexed", description="slot 3"))

    nft_operations.set_provider_metadata(
        context, provider, "001", metadata, idx=3, gas_limit=200_000
    )

    assert nft_operations.query_provider_nft_info(context, provider, 3) == metadata
    assert nft_operations.query_provider_nft_info(context, provider, 0) == Metadata()


def test_provider_viewing_keys_are_created_and_set(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)
    provider = context.provider_contract

    created = nft_operations.create_provider_viewing_key(
        context, provider, "secret", gas_limit=200_000
    )
    chosen = nft_operations.set_provider_viewing_key(
        context, provider, "password", gas_limit=200_000
    )

    assert created.startswith("api_key_")
    assert chosen == "password"
    assert chain.contracts[provider.address][1].viewing_keys[WALLET] == "password"


def test_change_admin_is_reserved_to_the_provider_admin(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, _ = _deployed_suite(tmp_path, chain)
    provider = context.provider_contract

    nft_operations.change_provider_admin(context, provider, "secret1other", gas_limit=200_000)

    assert chain.contracts[provider.address][1].admin == "secret1other"
    with pytest.raises(ExecutionError, match="admin command"):
        nft_operations.change_provider_admin(context, provider, WALLET, gas_limit=200_000)


def test_suite_publishes_batch_metadata_and_provider_viewing_key(tmp_path: Path) -> None:
    chain = _InMemoryDevnet()
    context, provider_settings = _deployed_suite(tmp_path, chain)

    ScenarioRunner().run(build_nft_suite(SCENARIO_SETTINGS, provider_settings), context)

    assert len(context.require("batch_provider_metadata")) == 2
    assert context.require("provider_viewing_key") == "password"
    provider_state = chain.contracts[context.provider_contract.address][1]
    assert provider_state.public[1] == {
        "extension": {"name": "provider name", "description": "by index"}
    }
    assert provider_state.admin == WALLET
