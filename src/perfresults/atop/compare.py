"""Atop CSV comparison.

An atop export holds two sections in one CSV file: a summary of the whole
host followed by per-process detail. The sections are split apart and the
baseline and candidate runs are compared cell by cell::

    diff    = candidate - baseline
    percent = diff / baseline * 100      (undefined when baseline == 0)
    "+5.00 (+50.00%)"

Summary rows are matched by position, detail rows by process name.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path

from perfresults._constants import (
    ATOP_DETAIL_COMPARISON,
    ATOP_SUMMARY_COMPARISON,
    DEFAULT_TABLE_CLASS,
    UNDEFINED_PERCENT,
)
from perfresults.errors import FormatError
from perfresults.tables import CsvTable, csv2html, parse_number, read_csv_rows

logger = logging.getLogger(__name__)

ONLY_IN_BASELINE = "only in baseline"
ONLY_IN_CANDIDATE = "only in candidate"


@dataclass
class AtopSnapshot:
    """The two sections of one atop CSV export."""

    summary: CsvTable
    detail: CsvTable
    source: Path | None = None


@dataclass(frozen=True)
class ComparisonResult:
    """Baseline vs. candidate for one cell. ``percent`` is None when undefined."""

    baseline: float
    candidate: float
    diff: float
    percent: float | None
    formatted: str


@dataclass
class RowComparison:
    """A row present in both tables and its compared numeric cells."""

    key: str
    baseline: list[str]
    candidate: list[str]
    cells: dict[str, ComparisonResult] = field(default_factory=dict)


@dataclass
class TableComparison:
    """Outcome of comparing two tables with the same header."""

    header: list[str]
    key_column: int | None
    rows: list[RowComparison] = field(default_factory=list)
    only_in_baseline: list[str] = field(default_factory=list)
    only_in_candidate: list[str] = field(default_factory=list)

    @property
    def cells(self) -> list[tuple[str, str, ComparisonResult]]:
        """Every compared cell as ``(row key, column, result)``."""
        return [
            (row.key, column, result)
            for row in self.rows
            for column, result in row.cells.items()
        ]

    def to_table(self, source: Path | None = None) -> CsvTable:
        """Tabulate the comparison.

        Compared cells hold the formatted diff, other cells the candidate
        value. Rows found in only one table are listed with a marker instead
        of values.
        """
        value_columns = [i for i in range(len(self.header)) if i != self.key_column]
        if self.key_column is None:
            key_heading = _unique_name("row", self.header)
        else:
            key_heading = self.header[self.key_column]
        header = [key_heading] + [self.header[i] for i in value_columns]

        table = CsvTable(header=header, source=source)
        for row in self.rows:
            cells = []
            for i in value_columns:
                result = row.cells.get(self.header[i])
                cells.append(result.formatted if result else row.candidate[i])
            table.append_row([row.key] + cells)
        for key in self.only_in_baseline:
            table.append_row([key] + [ONLY_IN_BASELINE] * len(value_columns))
        for key in self.only_in_candidate:
            table.append_row([key] + [ONLY_IN_CANDIDATE] * len(value_columns))
        return table


@dataclass
class AtopComparison:
    """Summary and detail comparisons of two atop exports."""

    summary: TableComparison
    detail: TableComparison
    outputs: list[Path] = field(default_factory=list)


def _is_marker(row: list[str], marker: str) -> bool:
    if marker:
        return bool(row) and row[0].strip() == marker
    return all(not cell.strip() for cell in row)


def _strip_blank_rows(rows: list[list[str]]) -> list[list[str]]:
    return [row for row in rows if any(cell.strip() for cell in row)]


def split_atop_csv_results(path: Path | str, marker: str = "") -> AtopSnapshot:
    """Split an atop CSV export into its summary and detail tables.

    Args:
        path: Combined atop CSV file
        marker: Empty when a blank row separates the sections, otherwise the
            first cell of the detail section's heading row

    Raises:
        NotFoundError: If the file does not exist
        FormatError: If the marker is missing or a section has no data row
    """
    path = Path(path)
    rows = read_csv_rows(path)

    # The summary heading itself never counts as the marker
    start = 0
    while start < len(rows) and not any(cell.strip() for cell in rows[start]):
        start += 1

    split_at = next(
        (i for i in range(start + 1, len(rows)) if _is_marker(rows[i], marker)),
        None,
    )
    if split_at is None:
        what = f"'{marker}' heading" if marker else "blank row"
        raise FormatError(f"No {what} separating summary and detail sections in {path}")

    summary_rows = _strip_blank_rows(rows[start:split_at])
    detail_rows = _strip_blank_rows(rows[split_at:] if marker else rows[split_at + 1 :])

    sections = {}
    for name, section_rows in (("summary", summary_rows), ("detail", detail_rows)):
        if len(section_rows) < 2:
            raise FormatError(f"The {name} section of {path} needs a header and at least one row")
        sections[name] = CsvTable.from_rows(section_rows, source=path)

    return AtopSnapshot(summary=sections["summary"], detail=sections["detail"], source=path)


def percent_diff(baseline: float, candidate: float) -> float | None:
    """Signed change of *candidate* relative to *baseline*, in percent.

    Returns None when the change is undefined (zero baseline, non-zero
    candidate). Two zeros are no change.
    """
    if baseline == 0:
        return 0.0 if candidate == 0 else None
    return (candidate - baseline) / baseline * 100


def percent_diff_string(baseline: float, candidate: float, places: int = 2) -> str:
    """Format the change as ``"<diff> (<percent>%)"`` with explicit signs."""
    diff = candidate - baseline
    percent = percent_diff(baseline, candidate)
    if percent is None:
        return f"{diff:+.{places}f} ({UNDEFINED_PERCENT})"
    return f"{diff:+.{places}f} ({percent:+.{places}f}%)"


def compare_values(baseline: float, candidate: float, places: int = 2) -> ComparisonResult:
    return ComparisonResult(
        baseline=baseline,
        candidate=candidate,
        diff=candidate - baseline,
        percent=percent_diff(baseline, candidate),
        formatted=percent_diff_string(baseline, candidate, places),
    )


def _unique_name(name: str, taken) -> str:
    """*name*, or *name* with the first free occurrence suffix " (n)"."""
    candidate = name
    n = 1
    while candidate in taken:
        n += 1
        candidate = f"{name} ({n})"
    return candidate


def _keyed_rows(table: CsvTable, key_column: int | None) -> OrderedDict[str, list[str]]:
    """Index rows by key; repeated keys get an occurrence suffix."""
    keyed: OrderedDict[str, list[str]] = OrderedDict()
    for index, row in enumerate(table.rows, start=1):
        if key_column is None:
            keyed[f"row {index}"] = row
            continue
        keyed[_unique_name(row[key_column], keyed)] = row
    return keyed


def compare_tables(
    baseline: CsvTable,
    candidate: CsvTable,
    key_column: int | None = None,
    places: int = 2,
) -> TableComparison:
    """Compare every numeric cell of the rows found in both tables.

    Args:
        baseline: Table of the reference run
        candidate: Table of the run being evaluated
        key_column: Column identifying a row; None matches rows by position
        places: Decimal places of the formatted strings

    Raises:
        FormatError: If the headers differ
    """
    if baseline.header != candidate.header:
        raise FormatError(
            f"Cannot compare tables with different headers: "
            f"{baseline.source or 'baseline'} has {baseline.header}, "
            f"{candidate.source or 'candidate'} has {candidate.header}"
        )

    base_rows = _keyed_rows(baseline, key_column)
    cand_rows = _keyed_rows(candidate, key_column)

    result = TableComparison(header=list(baseline.header), key_column=key_column)
    result.only_in_baseline = [k for k in base_rows if k not in cand_rows]
    result.only_in_candidate = [k for k in cand_rows if k not in base_rows]

    for key, base_row in base_rows.items():
        if key not in cand_rows:
            continue
        cand_row = cand_rows[key]
        row = RowComparison(key=key, baseline=base_row, candidate=cand_row)
        for i, column in enumerate(baseline.header):
            if i == key_column:
                continue
            b = parse_number(base_row[i])
            c = parse_number(cand_row[i])
            if b is None or c is None:
                continue
            row.cells[column] = compare_values(b, c, places)
        result.rows.append(row)

    for key in result.only_in_baseline:
        logger.warning(f"Row '{key}' is only in the baseline; not compared")
    for key in result.only_in_candidate:
        logger.warning(f"Row '{key}' is only in the candidate; not compared")

    return result


def compare_atop_summary(
    baseline: AtopSnapshot, candidate: AtopSnapshot, places: int = 2
) -> TableComparison:
    """Compare summary sections, row by row in order."""
    return compare_tables(baseline.summary, candidate.summary, key_column=None, places=places)


def compare_atop_detail(
    baseline: AtopSnapshot, candidate: AtopSnapshot, places: int = 2
) -> TableComparison:
    """Compare detail sections, matching rows on the first column."""
    return compare_tables(baseline.detail, candidate.detail, key_column=0, places=places)


def compare_atop_csv_results(
    baseline_path: Path | str,
    candidate_path: Path | str,
    output_dir: Path | str | None = None,
    marker: str = "",
    places: int = 2,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> AtopComparison:
    """Compare two atop exports section by section.

    When *output_dir* is given the summary and detail comparisons are
    written there as CSV and rendered to HTML.
    """
    baseline = split_atop_csv_results(baseline_path, marker=marker)
    candidate = split_atop_csv_results(candidate_path, marker=marker)

    comparison = AtopComparison(
        summary=compare_atop_summary(baseline, candidate, places),
        detail=compare_atop_detail(baseline, candidate, places),
    )

    if output_dir is not None:
        output_dir = Path(output_dir).expanduser()
        output_dir.mkdir(parents=True, exist_ok=True)
        for name, section in (
            (ATOP_SUMMARY_COMPARISON, comparison.summary),
            (ATOP_DETAIL_COMPARISON, comparison.detail),
        ):
            csv_path = output_dir / name
            section.to_table(source=csv_path).write(csv_path)
            csv2html(csv_path, table_class=table_class)
            comparison.outputs.append(csv_path)

    logger.info(
        f"Compared {baseline_path} with {candidate_path}: "
        f"{len(comparison.summary.cells)} summary cells, "
        f"{len(comparison.detail.cells)} detail cells"
    )
    return comparison
