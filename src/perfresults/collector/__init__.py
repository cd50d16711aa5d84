"""puppet-metrics-collector data."""

from .archive import extract_tarball, is_tarball
from .puppetserver import (
    CatalogMetric,
    DocumentOutcome,
    MetricsDocument,
    MetricsExtraction,
    extract_puppet_metrics_collector_data,
    extract_puppetserver_metrics,
    extract_puppetserver_metrics_from_json,
)

__all__ = [
    "CatalogMetric",
    "DocumentOutcome",
    "MetricsDocument",
    "MetricsExtraction",
    "extract_puppet_metrics_collector_data",
    "extract_puppetserver_metrics",
    "extract_puppetserver_metrics_from_json",
    "extract_tarball",
    "is_tarball",
]
