"""puppet-metrics-collector extraction.

The collector leaves one JSON document per node and sample::

    puppet_metrics_collector/
      puppetserver/
        <hostname>/
          20190718T081502Z.json

Each document maps server names to services to metric categories. The
catalog metrics category is a list of ``{"metric": ..., "count": ...,
"mean": ..., "aggregate": ...}`` entries. Documents without it (collector
errors, services that have not compiled a catalog yet) are skipped.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from perfresults._constants import DEFAULT_TABLE_CLASS
from perfresults.config.schema import CollectorConfig
from perfresults.errors import FormatError, NotFoundError, ParseError, PerfResultsError
from perfresults.records import StatsRecord
from perfresults.tables import CsvTable, average_csv, csv2html

from .archive import extract_tarball, is_tarball

logger = logging.getLogger(__name__)


class MetricsDocument(BaseModel):
    """Top level of a collector document."""

    model_config = ConfigDict(extra="allow")

    timestamp: str | None = None
    servers: dict[str, Any] = {}

    def find_category(self, category: str) -> Any:
        """Return the first value stored under *category*, or None."""
        return _find_key(self.servers, category)


class CatalogMetric(BaseModel):
    """One entry of the catalog metrics category."""

    model_config = ConfigDict(extra="allow")

    metric: str


_CATALOG_METRICS = TypeAdapter(list[CatalogMetric])


@dataclass
class DocumentOutcome:
    """What happened to one collector document."""

    path: Path
    record: StatsRecord | None = None
    skipped: bool = False
    error: str | None = None


@dataclass
class MetricsExtraction:
    """Result of extracting a whole collector directory."""

    csv_path: Path
    html_path: Path
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    averages: list[float] | None = None

    @property
    def records(self) -> list[StatsRecord]:
        return [o.record for o in self.outcomes if o.record is not None]


def _find_key(node: Any, key: str) -> Any:
    if isinstance(node, dict):
        if key in node:
            return node[key]
        for value in node.values():
            found = _find_key(value, key)
            if found is not None:
                return found
    return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def extract_puppetserver_metrics_from_json(
    path: Path | str, config: CollectorConfig | None = None
) -> StatsRecord | None:
    """Extract the catalog metrics of one collector document.

    The record is keyed by hostname (the document's parent directory) and
    has one ``"<metric> <field>"`` value per catalog metric and configured
    field.

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the file is not valid JSON
        FormatError: If the category is present but malformed

    Returns:
        The record, or None when the document has no catalog metrics
    """
    config = config or CollectorConfig()
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Not UTF-8 text: {path} ({e})", path=str(path)) from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(  # noqa: B904
            f"Invalid JSON in {path}: {e} (content starts with {text[:40]!r})",
            path=str(path),
        )

    if not isinstance(raw, dict):
        raise FormatError(f"Expected a JSON object in {path}")
    try:
        document = MetricsDocument.model_validate(raw)
    except ValidationError as e:
        raise FormatError(f"Unexpected collector document layout in {path}: {e}") from e

    category = document.find_category(config.category)
    if not category:
        logger.info(f"No {config.category} found in {path}; ignoring")
        return None

    try:
        metrics = _CATALOG_METRICS.validate_python(category)
    except ValidationError as e:
        raise FormatError(f"Invalid {config.category} in {path}: {e}") from e

    fields: list[tuple[str, Any]] = []
    for metric in metrics:
        values = metric.model_dump()
        for name in config.fields:
            value = values.get(name)
            if not _is_number(value):
                raise FormatError(
                    f"Metric '{metric.metric}' has no finite {name}: {value!r} in {path}"
                )
            fields.append((f"{metric.metric} {name}", value))

    return StatsRecord(identifier=path.parent.name, fields=tuple(fields))


def extract_puppetserver_metrics(
    metrics_dir: Path | str,
    output_dir: Path | str | None = None,
    config: CollectorConfig | None = None,
    table_class: str = DEFAULT_TABLE_CLASS,
    places: int = 2,
) -> MetricsExtraction:
    """Tabulate the catalog metrics of every collected document.

    Documents are processed one at a time; a document that cannot be read
    is reported in its outcome and does not stop the others. The resulting
    CSV is averaged (when it has at least two rows) and rendered to HTML.

    Raises:
        FormatError: If the service directory is missing, holds no JSON
            documents, or no document yields catalog metrics
    """
    config = config or CollectorConfig()
    metrics_dir = Path(metrics_dir)
    service_dir = metrics_dir / config.service_dir
    if not service_dir.is_dir():
        raise FormatError(f"Directory not found: {service_dir}")

    json_files = sorted(p for p in service_dir.rglob("*.json") if p.is_file())
    if not json_files:
        raise FormatError(f"No JSON files found in {service_dir}")

    outcomes: list[DocumentOutcome] = []
    expected_fields: list[str] | None = None
    for json_path in json_files:
        try:
            record = extract_puppetserver_metrics_from_json(json_path, config)
        except (PerfResultsError, OSError) as e:
            logger.warning(f"Failed to process {json_path}: {e}")
            outcomes.append(DocumentOutcome(json_path, error=str(e)))
            continue

        if record is None:
            outcomes.append(DocumentOutcome(json_path, skipped=True))
            continue

        if expected_fields is None:
            expected_fields = record.field_names
        elif record.field_names != expected_fields:
            message = f"Metrics in {json_path} do not match the columns of earlier documents"
            logger.warning(message)
            outcomes.append(DocumentOutcome(json_path, error=message))
            continue

        outcomes.append(DocumentOutcome(json_path, record=record))

    records = [o.record for o in outcomes if o.record is not None]
    if not records or expected_fields is None:
        raise FormatError(f"No {config.category} found in any document under {service_dir}")

    target = Path(output_dir).expanduser() if output_dir else metrics_dir
    target.mkdir(parents=True, exist_ok=True)
    csv_path = target / f"{config.service_dir}.csv"

    table = CsvTable(header=["host"] + expected_fields, source=csv_path)
    for record in records:
        table.append_row([record.identifier] + [str(v) for v in record.values])
    table.write(csv_path)

    averages = None
    if len(records) > 1:
        averages = average_csv(csv_path, skip_first_column=True, places=places)
    else:
        logger.info(f"Only one document with {config.category}; not averaging {csv_path}")

    html_path = csv2html(csv_path, table_class=table_class)
    logger.info(
        f"Extracted {len(records)} of {len(json_files)} documents from {service_dir} to {csv_path}"
    )
    return MetricsExtraction(
        csv_path=csv_path, html_path=html_path, outcomes=outcomes, averages=averages
    )


def extract_puppet_metrics_collector_data(
    path: Path | str,
    output_dir: Path | str | None = None,
    config: CollectorConfig | None = None,
    table_class: str = DEFAULT_TABLE_CLASS,
    places: int = 2,
) -> MetricsExtraction:
    """Extract collector metrics from a tarball or an unpacked directory.

    Raises:
        NotFoundError: If *path* does not exist
        FormatError: If *path* is neither a tar archive nor a directory
    """
    config = config or CollectorConfig()
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"File not found: {path}")

    if path.is_dir():
        metrics_dir = path
    elif is_tarball(path):
        extracted = extract_tarball(path)
        metrics_dir = extracted / config.dir_name
    else:
        raise FormatError(f"Not a tar file or directory: {path}")

    return extract_puppetserver_metrics(
        metrics_dir,
        output_dir=output_dir,
        config=config,
        table_class=table_class,
        places=places,
    )
