"""Results warehouse queries."""

from .bigquery import QueryClient, baseline_versions, query_bigquery, verify_baseline_version

__all__ = [
    "QueryClient",
    "baseline_versions",
    "query_bigquery",
    "verify_baseline_version",
]
