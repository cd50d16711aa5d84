"""Column averages for CSV tables."""

from __future__ import annotations

import logging
from pathlib import Path

from perfresults._constants import AVERAGE_LABEL
from perfresults.errors import FormatError

from .csv_table import CsvTable, format_number, parse_number
from .validator import load_csv

logger = logging.getLogger(__name__)


def average_rows(table: CsvTable, skip_first_column: bool = False) -> list[float]:
    """Return the mean of each averaged column across the data rows.

    Args:
        table: Table to average
        skip_first_column: Treat the first column as a label and leave it out

    Raises:
        FormatError: If there are fewer than two data rows, or a cell in an
            averaged column is not a number
    """
    where = table.source or "table"
    if len(table.rows) < 2:
        raise FormatError(
            f"Nothing to average in {where}: found {len(table.rows)} data row(s), need at least 2"
        )

    start = 1 if skip_first_column else 0
    totals = [0.0] * (table.width - start)

    for row in table.rows:
        for offset, cell in enumerate(row[start:]):
            number = parse_number(cell)
            if number is None:
                raise FormatError(
                    f"Non-numeric value '{cell}' in column '{table.header[start + offset]}' "
                    f"of {where}"
                )
            totals[offset] += number

    count = len(table.rows)
    return [total / count for total in totals]


def averages_row(
    averages: list[float], skip_first_column: bool = False, places: int = 2
) -> list[str]:
    """Format averages as a CSV row, labelled when the first column was skipped."""
    cells = [format_number(a, places) for a in averages]
    return [AVERAGE_LABEL] + cells if skip_first_column else cells


def average_csv(
    path: Path | str, skip_first_column: bool = False, places: int = 2
) -> list[float]:
    """Append an averages row to the CSV file at *path*.

    The file is validated first and rewritten whole once the averages are
    known, so a failure leaves it untouched.

    Returns:
        The column averages
    """
    table = load_csv(path)
    averages = average_rows(table, skip_first_column=skip_first_column)
    table.append_row(averages_row(averages, skip_first_column=skip_first_column, places=places))
    table.write(path)
    logger.info(f"Appended averages row to {path}")
    return averages
