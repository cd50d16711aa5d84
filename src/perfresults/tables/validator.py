"""Structural validation of CSV files."""

from __future__ import annotations

from pathlib import Path

from perfresults.errors import FormatError

from .csv_table import CsvTable, read_csv_rows


def validate_csv(path: Path | str) -> bool:
    """Check that *path* is a CSV file usable downstream.

    The file must parse as delimited text, hold a header plus at least one
    data row, and every row must be as wide as the header. Cell contents are
    not inspected.

    Raises:
        NotFoundError: If the file does not exist
        FormatError: If any of the above does not hold
    """
    path = Path(path)
    rows = read_csv_rows(path)

    if len(rows) < 2:
        raise FormatError(f"Expected a header and at least one data row in {path}")

    expected = len(rows[0])
    for i, row in enumerate(rows[1:], start=2):
        if len(row) != expected:
            raise FormatError(
                f"Invalid number of columns in row {i} of {path}: "
                f"found {len(row)}, expected {expected}"
            )

    return True


def load_csv(path: Path | str) -> CsvTable:
    """Validate *path* and return its contents as a table."""
    path = Path(path)
    validate_csv(path)
    return CsvTable.from_rows(read_csv_rows(path), source=path)
