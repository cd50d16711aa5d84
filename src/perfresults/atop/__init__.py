"""Atop resource-usage comparisons."""

from .compare import (
    AtopComparison,
    AtopSnapshot,
    ComparisonResult,
    RowComparison,
    TableComparison,
    compare_atop_csv_results,
    compare_atop_detail,
    compare_atop_summary,
    compare_tables,
    compare_values,
    percent_diff,
    percent_diff_string,
    split_atop_csv_results,
)

__all__ = [
    "AtopComparison",
    "AtopSnapshot",
    "ComparisonResult",
    "RowComparison",
    "TableComparison",
    "compare_atop_csv_results",
    "compare_atop_detail",
    "compare_atop_summary",
    "compare_tables",
    "compare_values",
    "percent_diff",
    "percent_diff_string",
    "split_atop_csv_results",
]
