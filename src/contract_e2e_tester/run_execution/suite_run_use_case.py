"""Run execution use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from contract_e2e_tester.configuration import ConfigurationError, load_configuration
from contract_e2e_tester.configuration.runtime_settings import (
    ContractSettings,
    NetworkSettings,
    ScenarioSettings,
)
from contract_e2e_tester.contract_deployment import (
    ContractDeployer,
    DeployedContract,
    InstantiateError,
    MalformedReceiptError,
    UploadError,
)
from contract_e2e_tester.faucet_funding import FaucetFiller, FaucetTimeoutError
from contract_e2e_tester.network_client import (
    ChainRequestError,
    ClientConnectionError,
    ClientContext,
)
from contract_e2e_tester.nft_scenarios import build_nft_suite, deploy_suite_contracts
from contract_e2e_tester.results_writing import RunMetadata, write_results_workbook
from contract_e2e_tester.scenario_running import (
    ScenarioOutcome,
    ScenarioRunner,
    ScenarioStatus,
    ScenarioStep,
    SuiteContext,
)

from .run_contracts import RunArtifacts, RunOutcome, RunRequest

LOGGER = logging.getLogger(__name__)

SuiteBuilder = Callable[[ScenarioSettings, ContractSettings], Sequence[ScenarioStep]]


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_contract_suite_run(
    request: RunRequest,
    *,
    client_factory: Callable[[NetworkSettings], ClientContext] | None = None,
    faucet_filler_cls=None,
    suite_builder: SuiteBuilder | None = None,
) -> RunOutcome:
    """Deploy both contracts, run the NFT suite and write the results workbook.

    A failing scenario still produces a workbook (the failure plus every
    scenario that did not run) before the run is aborted with
    `RunExecutionError`. Setup failures write a workbook with every scenario
    not run.
    """
    resolved_client_factory = client_factory or _connect_secret_network
    resolved_faucet_filler_cls = faucet_filler_cls or FaucetFiller
    resolved_suite_builder = suite_builder or build_nft_suite

    artifacts = _load_run_artifacts(request.config_path, resolved_suite_builder)
    configuration = artifacts.configuration
    run_start = datetime.now(UTC)
    output_path = _resolve_output_path(request.config_path, request.output_dir).resolve()

    def write_report(
        outcomes: Sequence[ScenarioOutcome],
        client: ClientContext | None = None,
        contracts: tuple[DeployedContract, DeployedContract] | None = None,
    ) -> None:
        nft_contract, provider_contract = contracts or (None, None)
        write_results_workbook(
            output_path,
            artifacts.steps,
            outcomes,
            RunMetadata(
                run_start=run_start,
                config_path=Path(request.config_path).resolve(),
                output_path=output_path,
                endpoint=configuration.network.endpoint,
                chain_id=configuration.network.chain_id,
                dry_run=request.dry_run,
                wallet_address=client.address if client else None,
                nft_contract=nft_contract,
                provider_contract=provider_contract,
            ),
        )

    if request.dry_run:
        LOGGER.info("Dry run: skipping %d scenarios", len(artifacts.steps))
        write_report(())
        return RunOutcome(output_path=output_path, passed=0, dry_run=True)

    try:
        client, contracts = _prepare_suite(
            artifacts,
            client_factory=resolved_client_factory,
            faucet_filler_cls=resolved_faucet_filler_cls,
        )
    except RunExecutionError:
        write_report(())
        raise
    nft_contract, provider_contract = contracts
    context = SuiteContext(
        client=client, nft_contract=nft_contract, provider_contract=provider_contract
    )
    runner = ScenarioRunner()
    try:
        outcomes = runner.run(artifacts.steps, context)
    except Exception as exc:
        write_report(runner.outcomes, client, contracts)
        LOGGER.exception("Suite aborted; results written to %s", output_path)
        raise RunExecutionError(f"Scenario failed: {exc}") from exc

    write_report(outcomes, client, contracts)
    passed = sum(1 for outcome in outcomes if outcome.status is ScenarioStatus.PASSED)
    LOGGER.info("%d/%d scenarios passed", passed, len(outcomes))
    return RunOutcome(output_path=output_path, passed=passed, dry_run=False)


def _connect_secret_network(network: NetworkSettings) -> ClientContext:
    # pylint: disable=import-outside-toplevel
    from contract_e2e_tester.network_client.secret_network_client import (
        connect_secret_network_client,
    )

    return connect_secret_network_client(network)


def _resolve_output_path(config_path: str, output_dir: str | None) -> Path:
    config_file = Path(config_path)
    destination = Path(output_dir) if output_dir else config_file.parent
    timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return destination / f"{config_file.stem}-results-{timestamp}.xlsx"


def _load_run_artifacts(config_path: str, suite_builder: SuiteBuilder) -> RunArtifacts:
    try:
        configuration = load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc
    steps = tuple(suite_builder(configuration.scenarios, configuration.provider_contract))
    return RunArtifacts(configuration=configuration, steps=steps)


def _prepare_suite(
    artifacts: RunArtifacts,
    *,
    client_factory: Callable[[NetworkSettings], ClientContext],
    faucet_filler_cls,
) -> tuple[ClientContext, tuple[DeployedContract, DeployedContract]]:
    configuration = artifacts.configuration
    try:
        client = client_factory(configuration.network)
        faucet_filler = faucet_filler_cls(configuration.faucet, configuration.network.denom)
        try:
            faucet_filler.fill_up(client)
        finally:
            faucet_filler.close()
        contracts = deploy_suite_contracts(
            ContractDeployer(client),
            configuration.nft_contract,
            configuration.provider_contract,
        )
    except (
        ClientConnectionError,
        ChainRequestError,
        FaucetTimeoutError,
        UploadError,
        InstantiateError,
        MalformedReceiptError,
    ) as exc:
        LOGGER.exception("Suite setup failed")
        raise RunExecutionError(str(exc)) from exc
    return client, contracts
