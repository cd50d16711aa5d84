"""Gatling results to CSV/HTML."""

from __future__ import annotations

import logging
from pathlib import Path

from perfresults._constants import DEFAULT_TABLE_CLASS, GATLING_STATS_PATH
from perfresults.errors import NotFoundError
from perfresults.tables import CsvTable, csv2html

from .stats import extract_stats_records

logger = logging.getLogger(__name__)

CSV_HEADINGS = ["Request", "Count", "Min (ms)", "Max (ms)", "Mean (ms)", "Std Dev (ms)"]


def gatling_csv_path(results_dir: Path | str, output_dir: Path | str | None = None) -> Path:
    """``<output_dir or results_dir>/<basename(results_dir)>.csv``."""
    results_dir = Path(results_dir)
    target = Path(output_dir).expanduser() if output_dir else results_dir
    return target / f"{results_dir.name}.csv"


def gatling2csv(
    results_dir: Path | str,
    output_dir: Path | str | None = None,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> Path:
    """Write the request statistics of a Gatling run as CSV, then render it.

    Args:
        results_dir: Gatling results directory (holding ``js/stats.json``)
        output_dir: Directory for the CSV/HTML output (default: results_dir)
        table_class: CSS class of the rendered table

    Raises:
        NotFoundError: If results_dir is not a directory
        MalformedDocumentError: If the stats document is missing required nodes

    Returns:
        Path to the CSV file
    """
    results_dir = Path(results_dir)
    if not results_dir.is_dir():
        raise NotFoundError(f"Results directory not found: {results_dir}")

    records = extract_stats_records(results_dir / GATLING_STATS_PATH)

    csv_path = gatling_csv_path(results_dir, output_dir)
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    table = CsvTable(header=list(CSV_HEADINGS), source=csv_path)
    for record in records:
        table.append_row([str(v) for v in record.values])
    table.write(csv_path)
    logger.info(f"Wrote Gatling stats for {len(records)} requests to {csv_path}")

    csv2html(csv_path, table_class=table_class)
    return csv_path
