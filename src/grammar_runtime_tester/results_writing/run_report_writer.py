"""Results workbook writer service."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from grammar_runtime_tester.suite_execution.suite_models import OutcomeStatus, TestOutcome

from .report_models import RESULT_COLUMNS, RESULTS_SHEET_NAME, RUN_INFO_SHEET_NAME, RunMetadata

_COLUMN_WIDTHS = {"Test": 40, "Backend": 14, "Stage": 12, "Status": 12}
_TEXT_COLUMN_WIDTH = 60


def write_results_workbook(
    output_path: Path | str,
    outcomes: Sequence[TestOutcome],
    run_metadata: RunMetadata,
) -> None:
    """Write one row per test and backend plus a RunInfo summary sheet."""
    workbook = Workbook()
    sheet = workbook.active
    if sheet is None:
        raise RuntimeError("Workbook active sheet is not available.")
    assert isinstance(sheet, Worksheet)
    sheet.title = RESULTS_SHEET_NAME

    _write_header(sheet)
    for row, outcome in enumerate(outcomes, start=2):
        _write_outcome_row(sheet, row, outcome)

    _write_run_info_sheet(workbook, run_metadata, outcomes)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)


def _write_header(sheet: Worksheet) -> None:
    for column, name in enumerate(RESULT_COLUMNS, start=1):
        cell = sheet.cell(row=1, column=column, value=name)
        cell.style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = _COLUMN_WIDTHS.get(
            name, _TEXT_COLUMN_WIDTH
        )
    sheet.freeze_panes = "A2"


def _write_outcome_row(sheet: Worksheet, row: int, outcome: TestOutcome) -> None:
    values = (
        outcome.test_name,
        outcome.backend,
        outcome.stage_reached.name.lower() if outcome.stage_reached is not None else None,
        outcome.status.value,
        outcome.output,
        outcome.errors,
        outcome.detail,
    )
    for column, value in enumerate(values, start=1):
        cell = sheet.cell(row=row, column=column, value=_sanitize(value))
        if column > len(_COLUMN_WIDTHS):
            cell.alignment = Alignment(wrap_text=True, vertical="top")


def _sanitize(value: str | None) -> str | None:
    # program output may contain control characters that xlsx cannot store
    if value is None:
        return None
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def _write_run_info_sheet(
    workbook: Workbook,
    run_metadata: RunMetadata,
    outcomes: Sequence[TestOutcome],
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    counts = Counter(outcome.status for outcome in outcomes)
    entries = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("config_path", str(run_metadata.config_path)),
        ("suite_path", str(run_metadata.suite_path)),
        ("output_path", str(run_metadata.output_path)),
        ("total", len(outcomes)),
        ("passed", counts[OutcomeStatus.PASSED]),
        ("failed", counts[OutcomeStatus.FAILED]),
        ("error", counts[OutcomeStatus.ERROR]),
        ("skipped", counts[OutcomeStatus.SKIPPED]),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
