"""In-memory CSV tables.

A :class:`CsvTable` is a header plus data rows, all of the same width.
Cells are kept as the strings read from disk; numeric interpretation is left
to the code that needs it (averaging, comparison).
"""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

from perfresults.errors import FormatError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class CsvTable:
    """Header plus equally wide data rows."""

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    source: Path | None = None

    def __post_init__(self) -> None:
        where = f" in {self.source}" if self.source else ""
        if not self.header:
            raise FormatError(f"Empty header{where}")
        duplicates = sorted({h for h in self.header if self.header.count(h) > 1})
        if duplicates:
            raise FormatError(f"Duplicate column names {duplicates}{where}")
        for i, row in enumerate(self.rows, start=2):
            if len(row) != self.width:
                raise FormatError(
                    f"Row {i} has {len(row)} columns, expected {self.width}{where}"
                )

    @property
    def width(self) -> int:
        return len(self.header)

    def is_valid(self) -> bool:
        """True when the table has at least one data row."""
        return len(self.rows) > 0

    def column(self, index: int) -> list[str]:
        return [row[index] for row in self.rows]

    def append_row(self, row: list[str]) -> None:
        if len(row) != self.width:
            raise FormatError(f"Cannot append {len(row)} cells to a table of width {self.width}")
        self.rows.append(list(row))

    def to_rows(self) -> list[list[str]]:
        """Header followed by the data rows."""
        return [list(self.header)] + [list(r) for r in self.rows]

    @classmethod
    def from_rows(cls, rows: list[list[str]], source: Path | None = None) -> CsvTable:
        """Build a table whose first row is the header."""
        if not rows:
            raise FormatError(f"No rows{f' in {source}' if source else ''}")
        return cls(header=list(rows[0]), rows=[list(r) for r in rows[1:]], source=source)

    def write(self, path: Path | str) -> Path:
        """Write the table to *path*, replacing any existing file."""
        return write_csv_rows(path, self.to_rows())


def read_csv_rows(path: Path | str) -> list[list[str]]:
    """Read every row of a CSV file.

    Raises:
        NotFoundError: If the file does not exist
        FormatError: If the file is not delimited text
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}")

    try:
        with open(path, newline="", encoding="utf-8") as f:
            return [row for row in csv.reader(f, strict=True)]
    except (csv.Error, UnicodeDecodeError) as e:
        raise FormatError(f"Not a CSV file: {path} ({e})") from e


def write_csv_rows(path: Path | str, rows: list[list[str]]) -> Path:
    """Serialize *rows* and write them in a single write."""
    path = Path(path)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    path.write_text(buf.getvalue(), encoding="utf-8")
    logger.info(f"Wrote {len(rows)} rows to {path}")
    return path


def parse_number(value: str) -> float | None:
    """Parse a CSV cell as a number, or None when it is not one."""
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_number(value: float, places: int = 2) -> str:
    """Render whole numbers without a fraction, others rounded to *places*."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.{places}f}"
