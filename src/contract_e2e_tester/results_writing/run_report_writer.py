"""Results workbook writer service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from contract_e2e_tester.contract_deployment.deployment_models import DeployedContract
from contract_e2e_tester.scenario_running.scenario_models import (
    ScenarioOutcome,
    ScenarioStatus,
    ScenarioStep,
)

from .report_models import ReportStatus, RunMetadata

SCENARIO_SHEET_NAME = "Scenarios"
RUN_INFO_SHEET_NAME = "RunInfo"
SCENARIO_COLUMNS = ("Name", "Description", "Status", "Gas used", "Duration (s)", "Error")

_STATUS_BY_OUTCOME = {
    ScenarioStatus.PASSED: ReportStatus.PASSED,
    ScenarioStatus.FAILED: ReportStatus.FAILED,
    ScenarioStatus.PENDING: ReportStatus.NOT_RUN,
    ScenarioStatus.RUNNING: ReportStatus.NOT_RUN,
}


def report_status(outcome: ScenarioOutcome | None, *, dry_run: bool) -> ReportStatus:
    if dry_run:
        return ReportStatus.SKIPPED
    if outcome is None:
        return ReportStatus.NOT_RUN
    return _STATUS_BY_OUTCOME[outcome.status]


def write_results_workbook(
    output_path: Path | str,
    steps: Sequence[ScenarioStep],
    outcomes: Sequence[ScenarioOutcome],
    run_metadata: RunMetadata,
) -> Path:
    """Write the Scenarios and RunInfo sheets and return the written path."""
    outcomes_by_name = {outcome.name: outcome for outcome in outcomes}
    statuses = [
        report_status(outcomes_by_name.get(step.name), dry_run=run_metadata.dry_run)
        for step in steps
    ]

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SCENARIO_SHEET_NAME
    _write_scenario_rows(sheet, steps, outcomes_by_name, statuses)
    _write_run_info_sheet(workbook.create_sheet(RUN_INFO_SHEET_NAME), run_metadata, statuses)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output


def _write_scenario_rows(
    sheet: Worksheet,
    steps: Sequence[ScenarioStep],
    outcomes_by_name: Mapping[str, ScenarioOutcome],
    statuses: Sequence[ReportStatus],
) -> None:
    for column, header in enumerate(SCENARIO_COLUMNS, start=1):
        cell = sheet.cell(row=1, column=column, value=header)
        cell.font = Font(bold=True)

    for row, (step, status) in enumerate(zip(steps, statuses, strict=True), start=2):
        outcome = outcomes_by_name.get(step.name)
        duration = outcome.duration_seconds if outcome else None
        sheet.cell(row=row, column=1, value=step.name)
        sheet.cell(row=row, column=2, value=step.description)
        sheet.cell(row=row, column=3, value=status.value)
        sheet.cell(row=row, column=4, value=outcome.gas_used if outcome else 0)
        sheet.cell(row=row, column=5, value=round(duration, 3) if duration is not None else None)
        sheet.cell(row=row, column=6, value=outcome.error_message if outcome else None)

    widths = (24, 60, 10, 12, 14, 80)
    for column, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(column)].width = width
    sheet.freeze_panes = "A2"


def _write_run_info_sheet(
    sheet: Worksheet, run_metadata: RunMetadata, statuses: Sequence[ReportStatus]
) -> None:
    rows: list[tuple[str, object]] = [
        ("Run start (UTC)", run_metadata.run_start.isoformat()),
        ("Configuration", str(run_metadata.config_path)),
        ("Output", str(run_metadata.output_path)),
        ("Endpoint", run_metadata.endpoint),
        ("Chain id", run_metadata.chain_id),
        ("Dry run", run_metadata.dry_run),
        ("Wallet address", run_metadata.wallet_address),
    ]
    rows.extend(_contract_rows("NFT contract", run_metadata.nft_contract))
    rows.extend(_contract_rows("Provider contract", run_metadata.provider_contract))
    rows.extend(
        [
            ("Scenarios", len(statuses)),
            ("Passed", statuses.count(ReportStatus.PASSED)),
            ("Failed", statuses.count(ReportStatus.FAILED)),
            ("Not run", statuses.count(ReportStatus.NOT_RUN)),
            ("Skipped", statuses.count(ReportStatus.SKIPPED)),
        ]
    )
    for row, (label, value) in enumerate(rows, start=1):
        sheet.cell(row=row, column=1, value=label).font = Font(bold=True)
        sheet.cell(row=row, column=2, value=value)
    sheet.column_dimensions["A"].width = 24
    sheet.column_dimensions["B"].width = 80


def _contract_rows(label: str, contract: DeployedContract | None) -> list[tuple[str, object]]:
    if contract is None:
        return [(f"{label} address", None), (f"{label} code hash", None)]
    return [
        (f"{label} address", contract.address),
        (f"{label} code hash", contract.code_hash),
        (f"{label} code id", contract.code_id),
        (f"{label} label", contract.label),
    ]
