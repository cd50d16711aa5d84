"""Shared constants for perfresults."""

# Default config file name for auto-discovery
DEFAULT_CONFIG = "perfresults.yaml"

# Markers wrapping the table fragment in every csv2html document.
# extract_table_from_csv2html_output() returns whatever sits between them.
CSV_HTML_START = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "<head>\n"
    '<meta charset="utf-8">\n'
    '<link rel="stylesheet" '
    'href="https://stackpath.bootstrapcdn.com/bootstrap/4.3.1/css/bootstrap.min.css">\n'
    "</head>\n"
    "<body>\n"
)
CSV_HTML_END = "</body>\n</html>\n"

DEFAULT_TABLE_CLASS = "table table-bordered"

# Gatling writes its aggregated statistics here, relative to the results dir
GATLING_STATS_PATH = "js/stats.json"

# puppet-metrics-collector layout:
#   puppet_metrics_collector/puppetserver/<hostname>/<timestamp>.json
PUPPET_METRICS_COLLECTOR_DIR_NAME = "puppet_metrics_collector"
PUPPETSERVER_DIR_NAME = "puppetserver"
CATALOG_METRICS_CATEGORY = "catalog-metrics"
CATALOG_METRIC_FIELDS = ("count", "mean", "aggregate")

AVERAGE_LABEL = "average"
UNDEFINED_PERCENT = "undefined"

ATOP_SUMMARY_COMPARISON = "atop_summary_comparison.csv"
ATOP_DETAIL_COMPARISON = "atop_detail_comparison.csv"

# Credential the BigQuery client library reads from the environment
BIGQUERY_CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
BASELINE_VERSIONS_SQL = (
    "SELECT DISTINCT pe_build_number FROM `perf-metrics.perf_metrics.atop_metrics`"
)
