"""Gatling simulation results."""

from .export import CSV_HEADINGS, gatling2csv, gatling_csv_path
from .stats import (
    STATS_FIELDS,
    GroupNode,
    NodeType,
    RequestNode,
    extract_stats_records,
    gatling_json_stats_group_node,
    gatling_json_stats_group_node_contents,
)

__all__ = [
    "CSV_HEADINGS",
    "STATS_FIELDS",
    "GroupNode",
    "NodeType",
    "RequestNode",
    "extract_stats_records",
    "gatling2csv",
    "gatling_csv_path",
    "gatling_json_stats_group_node",
    "gatling_json_stats_group_node_contents",
]
