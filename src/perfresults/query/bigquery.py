"""Baseline lookups against the performance results warehouse.

Queries run through the Google BigQuery client library, which is an
optional dependency (``pip install perfresults[bigquery]``). The client reads
its service account key from ``GOOGLE_APPLICATION_CREDENTIALS``; queries fail
before contacting the service when that variable is not set.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from perfresults._constants import BASELINE_VERSIONS_SQL, BIGQUERY_CREDENTIALS_ENV
from perfresults.errors import QueryError

logger = logging.getLogger(__name__)


class QueryClient(Protocol):
    """The part of ``google.cloud.bigquery.Client`` used here."""

    def query(self, sql: str) -> Any: ...


def _default_client() -> QueryClient:
    try:
        from google.cloud import bigquery
    except ImportError as e:
        raise QueryError(
            "google-cloud-bigquery is not installed; install perfresults[bigquery]"
        ) from e
    return bigquery.Client()


def _rows(result: Any) -> list[dict[str, Any]]:
    # QueryJob -> RowIterator; plain iterables are taken as-is
    if hasattr(result, "result"):
        result = result.result()
    return [dict(row.items()) for row in result]


def query_bigquery(
    sql: str, client_factory: Callable[[], QueryClient] | None = None
) -> list[dict[str, Any]]:
    """Run *sql* and return the rows as dicts.

    Raises:
        QueryError: If the credentials variable is unset or empty
    """
    if not os.environ.get(BIGQUERY_CREDENTIALS_ENV):
        raise QueryError(f"{BIGQUERY_CREDENTIALS_ENV} must be set to query BigQuery")

    client = (client_factory or _default_client)()
    logger.info(f"Querying BigQuery: {sql}")
    data = _rows(client.query(sql))
    if not data:
        logger.error(f"Query returned no data: {sql}")
    return data


def baseline_versions(
    query: Callable[[str], list[Mapping[str, Any]]] = query_bigquery,
) -> list[str]:
    """Return the build numbers that have stored baseline results.

    Raises:
        QueryError: If no baseline versions are found
    """
    data = query(BASELINE_VERSIONS_SQL)
    if not data:
        raise QueryError("Error: no baseline versions found")
    return [str(row["pe_build_number"]) for row in data]


def verify_baseline_version(
    version: str,
    query: Callable[[str], list[Mapping[str, Any]]] = query_bigquery,
) -> bool:
    """Check that *version* has stored baseline results.

    Raises:
        QueryError: If the version is not a known baseline
    """
    versions = baseline_versions(query)
    if version not in versions:
        raise QueryError(
            f"Baseline version {version} not found; available: {', '.join(versions)}"
        )
    return True
