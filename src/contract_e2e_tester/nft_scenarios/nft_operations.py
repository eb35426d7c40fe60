"""Single contract calls the NFT scenarios are composed of."""

from __future__ import annotations

import logging

from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.contract_invocation.invocation_models import TransactionResult
from contract_e2e_tester.contract_messages.metadata_models import Extension, Metadata, ViewerInfo
from contract_e2e_tester.contract_messages.nft_messages import (
    MintNft,
    NftInfo,
    PrivateMetadata,
    ProviderMetadata,
    RegisterMetadataProvider,
    SetMetadata,
    SetViewingKey,
    decode_nft_info,
    decode_private_metadata,
    decode_provider_metadata,
)
from contract_e2e_tester.contract_messages.provider_messages import (
    ChangeAdmin,
    CreateViewingKey,
    ProviderNftInfo,
    ProviderPrivateMetadata,
    ProviderSetMetadata,
    ProviderSetViewingKey,
    decode_provider_nft_info,
    decode_provider_private_metadata,
)
from contract_e2e_tester.scenario_running.suite_context import SuiteContext

LOGGER = logging.getLogger(__name__)


class ScenarioCheckError(Exception):
    """Raised when a contract answered, but not with what the scenario expects."""


def expect_answer(result: TransactionResult, tag: str) -> None:
    """Check that the decoded execute data, when present, is the `tag` answer."""
    if result.data is None:
        return
    if not isinstance(result.data, dict) or tag not in result.data:
        raise ScenarioCheckError(f"Expected '{tag}' answer, got: {result.data!r}")


def mint_token(context: SuiteContext, token_id: str, *, gas_limit: int) -> TransactionResult:
    message = MintNft(
        token_id=token_id,
        owner=context.client.address,
        public_metadata=Metadata(extension=Extension()),
        private_metadata=Metadata(extension=Extension()),
    )
    result = context.record(
        context.transaction_invoker().execute(context.nft_contract, message, gas_limit=gas_limit)
    )
    expect_answer(result, MintNft.tag)
    return result


def register_provider(
    context: SuiteContext, provider: DeployedContract, *, gas_limit: int
) -> TransactionResult:
    message = RegisterMetadataProvider(address=provider.address, code_hash=provider.code_hash)
    result = context.record(
        context.transaction_invoker().execute(context.nft_contract, message, gas_limit=gas_limit)
    )
    registered = result.find_log_value("register_provider")
    LOGGER.info("Registered Provider address is: %s", registered)
    return result


def set_token_metadata(
    context: SuiteContext,
    token_id: str,
    public_metadata: Metadata,
    private_metadata: Metadata,
    *,
    gas_limit: int,
) -> TransactionResult:
    message = SetMetadata(
        token_id=token_id,
        public_metadata=public_metadata,
        private_metadata=private_metadata,
    )
    result = context.record(
        context.transaction_invoker().execute(context.nft_contract, message, gas_limit=gas_limit)
    )
    expect_answer(result, SetMetadata.tag)
    return result


def set_provider_metadata(
    context: SuiteContext,
    provider: DeployedContract,
    token_id: str,
    public_metadata: Metadata,
    *,
    idx: int = 0,
    gas_limit: int,
) -> TransactionResult:
    message = ProviderSetMetadata(token_id=token_id, idx=idx, public_metadata=public_metadata)
    result = context.record(
        context.transaction_invoker().execute(provider, message, gas_limit=gas_limit)
    )
    expect_answer(result, ProviderSetMetadata.tag)
    return result


def set_viewing_key(context: SuiteContext, key: str, *, gas_limit: int) -> TransactionResult:
    result = context.record(
        context.transaction_invoker().execute(
            context.nft_contract, SetViewingKey(key=key), gas_limit=gas_limit
        )
    )
    expect_answer(result, "viewing_key")
    return result


def query_nft_info(context: SuiteContext, token_id: str) -> Metadata:
    return context.query_invoker().query_as(
        context.nft_contract, NftInfo(token_id=token_id), decode_nft_info
    )


def query_private_metadata(context: SuiteContext, token_id: str, viewing_key: str) -> Metadata:
    viewer = ViewerInfo(address=context.client.address, viewing_key=viewing_key)
    return context.query_invoker().query_as(
        context.nft_contract,
        PrivateMetadata(token_id=token_id, viewer=viewer),
        decode_private_metadata,
    )


def query_provider_metadata(
    context: SuiteContext, token_id: str, viewing_key: str | None = None
) -> tuple[Metadata, ...]:
    viewer = (
        ViewerInfo(address=context.client.address, viewing_key=viewing_key)
        if viewing_key is not None
        else None
    )
    return context.query_invoker().query_as(
        context.nft_contract,
        ProviderMetadata(token_id=token_id, viewer=viewer),
        decode_provider_metadata,
    )


def query_provider_nft_info(
    context: SuiteContext, provider: DeployedContract, token_idx: int
) -> Metadata:
    return context.query_invoker().query_as(
        provider, ProviderNftInfo(token_idx=token_idx), decode_provider_nft_info
    )


def create_provider_viewing_key(
    context: SuiteContext, provider: DeployedContract, entropy: str, *, gas_limit: int
) -> str:
    """Let the provider derive a viewing key for the wallet and return it."""
    result = context.record(
        context.transaction_invoker().execute(
            provider, CreateViewingKey(entropy=entropy), gas_limit=gas_limit
        )
    )
    return _viewing_key_answer(result)


def set_provider_viewing_key(
    context: SuiteContext, provider: DeployedContract, key: str, *, gas_limit: int
) -> str:
    result = context.record(
        context.transaction_invoker().execute(
            provider, ProviderSetViewingKey(key=key), gas_limit=gas_limit
        )
    )
    return _viewing_key_answer(result)


def query_provider_private_metadata(
    context: SuiteContext, provider: DeployedContract, token_id: str, viewing_key: str
) -> Metadata:
    viewer = ViewerInfo(address=context.client.address, viewing_key=viewing_key)
    return context.query_invoker().query_as(
        provider,
        ProviderPrivateMetadata(token_id=token_id, viewer=viewer),
        decode_provider_private_metadata,
    )


def change_provider_admin(
    context: SuiteContext, provider: DeployedContract, address: str, *, gas_limit: int
) -> TransactionResult:
    result = context.record(
        context.transaction_invoker().execute(
            provider, ChangeAdmin(address=address), gas_limit=gas_limit
        )
    )
    expect_answer(result, ChangeAdmin.tag)
    return result


def _viewing_key_answer(result: TransactionResult) -> str:
    expect_answer(result, "viewing_key")
    answer = result.data["viewing_key"] if isinstance(result.data, dict) else None
    key = answer.get("key") if isinstance(answer, dict) else None
    if not isinstance(key, str) or not key:
        raise ScenarioCheckError(f"Expected a viewing key answer, got: {result.data!r}")
    return key
