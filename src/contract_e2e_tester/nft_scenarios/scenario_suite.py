"""Ordered NFT + metadata-provider integration suite."""

from __future__ import annotations

import logging
from functools import partial

from contract_e2e_tester.configuration.runtime_settings import (
    ContractSettings,
    ScenarioSettings,
)
from contract_e2e_tester.contract_invocation.query_invoker import QueryError
from contract_e2e_tester.contract_messages.metadata_models import Extension, Metadata
from contract_e2e_tester.scenario_running.scenario_models import ScenarioStep
from contract_e2e_tester.scenario_running.suite_context import (
    NFT_CONTRACT_KEY,
    PROVIDER_CONTRACT_KEY,
    SuiteContext,
)

from . import nft_operations
from .nft_operations import ScenarioCheckError
from .suite_deployment import deploy_provider_contract

LOGGER = logging.getLogger(__name__)

MINTED_TOKEN_KEY = "minted_token"
REGISTERED_PROVIDERS_KEY = "registered_providers"
TOKEN_METADATA_KEY = "token_metadata"
VIEWING_KEY_KEY = "viewing_key"
BATCH_METADATA_KEY = "batch_provider_metadata"
PROVIDER_VIEWING_KEY_KEY = "provider_viewing_key"

PROVIDER_TOKEN_IDX = 1
PROVIDER_KEY_ENTROPY = "secret"

PUBLIC_METADATA = Metadata(extension=Extension(name="test name", description="hello world"))
PRIVATE_METADATA = Metadata(
    extension=Extension(name="private name", description="hello world, but private")
)
PROVIDER_METADATA = Metadata(extension=Extension(name="provider name", description="by index"))


def mint_scenario(context: SuiteContext, settings: ScenarioSettings) -> None:
    nft_operations.mint_token(context, settings.token_id, gas_limit=settings.execute_gas_limit)
    context.publish(MINTED_TOKEN_KEY, settings.token_id)


def register_provider_scenario(context: SuiteContext, settings: ScenarioSettings) -> None:
    nft_operations.register_provider(
        context, context.provider_contract, gas_limit=settings.execute_gas_limit
    )
    context.publish(REGISTERED_PROVIDERS_KEY, (context.provider_contract,))


def set_metadata_scenario(context: SuiteContext, settings: ScenarioSettings) -> None:
    token_id = context.require(MINTED_TOKEN_KEY)
    nft_operations.set_token_metadata(
        context,
        token_id,
        PUBLIC_METADATA,
        PRIVATE_METADATA,
        gas_limit=settings.execute_gas_limit,
    )
    context.publish(TOKEN_METADATA_KEY, PUBLIC_METADATA)


def query_metadata_scenario(context: SuiteContext, settings: ScenarioSettings) -> None:
    token_id = context.require(MINTED_TOKEN_KEY)
    public_metadata = nft_operations.query_nft_info(context, token_id)
    LOGGER.info("nft_info for %s: %s", token_id, public_metadata)

    nft_operations.set_viewing_key(
        context, settings.viewing_key, gas_limit=settings.execute_gas_limit
    )
    context.publish(VIEWING_KEY_KEY, settings.viewing_key)
    private_metadata = nft_operations.query_private_metadata(
        context, token_id, settings.viewing_key
    )
    LOGGER.info("private_metadata for %s: %s", token_id, private_metadata)

    wrong_key = f"not-{settings.viewing_key}"
    try:
        nft_operations.query_private_metadata(context, token_id, wrong_key)
    except QueryError:
        LOGGER.info("private_metadata rejected the wrong viewing key")
    else:
        raise ScenarioCheckError("private_metadata accepted a wrong viewing key")


def batch_provider_metadata_scenario(
    context: SuiteContext,
    settings: ScenarioSettings,
    provider_settings: ContractSettings,
) -> None:
    token_id = context.require(MINTED_TOKEN_KEY)
    registered = tuple(context.require(REGISTERED_PROVIDERS_KEY))
    second_provider = deploy_provider_contract(
        context.deployer(), provider_settings, context.nft_contract
    )
    nft_operations.register_provider(
        context, second_provider, gas_limit=settings.execute_gas_limit
    )
    registered = (*registered, second_provider)
    context.publish(REGISTERED_PROVIDERS_KEY, registered)

    expected_names = []
    for position, provider in enumerate(registered):
        name = f"provider {position}"
        nft_operations.set_provider_metadata(
            context,
            provider,
            token_id,
            Metadata(extension=Extension(name=name)),
            gas_limit=settings.execute_gas_limit,
        )
        expected_names.append(name)

    viewing_key = context.artifacts.get(VIEWING_KEY_KEY)
    entries = nft_operations.query_provider_metadata(context, token_id, viewing_key)
    if len(entries) != len(registered):
        raise ScenarioCheckError(
            f"Expected {len(registered)} provider metadata entries, got {len(entries)}"
        )
    names = [entry.extension.name if entry.extension else None for entry in entries]
    if names != expected_names:
        raise ScenarioCheckError(
            f"Provider metadata out of registration order: {names} != {expected_names}"
        )
    context.publish(BATCH_METADATA_KEY, entries)


def provider_contract_scenario(context: SuiteContext, settings: ScenarioSettings) -> None:
    token_id = context.require(MINTED_TOKEN_KEY)
    provider = context.provider_contract
    nft_operations.set_provider_metadata(
        context,
        provider,
        token_id,
        PROVIDER_METADATA,
        idx=PROVIDER_TOKEN_IDX,
        gas_limit=settings.execute_gas_limit,
    )
    stored = nft_operations.query_provider_nft_info(context, provider, PROVIDER_TOKEN_IDX)
    if stored != PROVIDER_METADATA:
        raise ScenarioCheckError(
            f"Provider nft_info at index {PROVIDER_TOKEN_IDX} returned {stored}, "
            f"expected {PROVIDER_METADATA}"
        )

    created_key = nft_operations.create_provider_viewing_key(
        context, provider, PROVIDER_KEY_ENTROPY, gas_limit=settings.execute_gas_limit
    )
    LOGGER.info("Provider created viewing key of length %d", len(created_key))
    key = nft_operations.set_provider_viewing_key(
        context, provider, settings.viewing_key, gas_limit=settings.execute_gas_limit
    )
    if key != settings.viewing_key:
        raise ScenarioCheckError(f"Provider echoed viewing key {key!r}")
    context.publish(PROVIDER_VIEWING_KEY_KEY, key)
    private_metadata = nft_operations.query_provider_private_metadata(
        context, provider, token_id, key
    )
    LOGGER.info("Provider private_metadata for %s: %s", token_id, private_metadata)

    # The wallet stays admin: the handover targets its own address.
    nft_operations.change_provider_admin(
        context, provider, context.client.address, gas_limit=settings.execute_gas_limit
    )


def gas_limits_scenario(context: SuiteContext) -> None:
    for result in context.transactions:
        if result.gas_used <= 0:
            raise ScenarioCheckError(f"{result.entry_point} reported no gas usage")
        if result.gas_used > result.gas_limit:
            raise ScenarioCheckError(
                f"{result.entry_point} used {result.gas_used} gas, above its "
                f"{result.gas_limit} limit"
            )


def build_nft_suite(
    scenario_settings: ScenarioSettings, provider_settings: ContractSettings
) -> tuple[ScenarioStep, ...]:
    """Return the suite in execution order."""
    return (
        ScenarioStep(
            name="mint",
            action=partial(mint_scenario, settings=scenario_settings),
            requires=(NFT_CONTRACT_KEY,),
            produces=(MINTED_TOKEN_KEY,),
            description="Mint a token to the wallet address",
        ),
        ScenarioStep(
            name="register_provider",
            action=partial(register_provider_scenario, settings=scenario_settings),
            requires=(NFT_CONTRACT_KEY, PROVIDER_CONTRACT_KEY),
            produces=(REGISTERED_PROVIDERS_KEY,),
            description="Register the provider contract with the NFT contract",
        ),
        ScenarioStep(
            name="set_metadata",
            action=partial(set_metadata_scenario, settings=scenario_settings),
            requires=(MINTED_TOKEN_KEY,),
            produces=(TOKEN_METADATA_KEY,),
            description="Set public and private metadata on the minted token",
        ),
        ScenarioStep(
            name="query_metadata",
            action=partial(query_metadata_scenario, settings=scenario_settings),
            requires=(MINTED_TOKEN_KEY,),
            produces=(VIEWING_KEY_KEY,),
            description="Query public metadata, then private metadata with a viewing key",
        ),
        ScenarioStep(
            name="batch_provider_metadata",
            action=partial(
                batch_provider_metadata_scenario,
                settings=scenario_settings,
                provider_settings=provider_settings,
            ),
            requires=(MINTED_TOKEN_KEY, REGISTERED_PROVIDERS_KEY),
            produces=(BATCH_METADATA_KEY,),
            description="Register a second provider and batch query both in order",
        ),
        ScenarioStep(
            name="provider_contract",
            action=partial(provider_contract_scenario, settings=scenario_settings),
            requires=(MINTED_TOKEN_KEY, PROVIDER_CONTRACT_KEY),
            produces=(PROVIDER_VIEWING_KEY_KEY,),
            description="Round-trip provider metadata by index, then its viewing keys and admin",
        ),
        ScenarioStep(
            name="gas_limits",
            action=gas_limits_scenario,
            description="Every recorded transaction used gas within its limit",
        ),
    )
