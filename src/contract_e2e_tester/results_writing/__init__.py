"""Results writing domain exports."""

from .report_models import ReportStatus, RunMetadata
from .run_report_writer import (
    RUN_INFO_SHEET_NAME,
    SCENARIO_COLUMNS,
    SCENARIO_SHEET_NAME,
    report_status,
    write_results_workbook,
)

__all__ = [
    "ReportStatus",
    "RunMetadata",
    "RUN_INFO_SHEET_NAME",
    "SCENARIO_COLUMNS",
    "SCENARIO_SHEET_NAME",
    "report_status",
    "write_results_workbook",
]
