"""Pydantic models for perfresults configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from perfresults._constants import (
    CATALOG_METRIC_FIELDS,
    CATALOG_METRICS_CATEGORY,
    DEFAULT_TABLE_CLASS,
    PUPPET_METRICS_COLLECTOR_DIR_NAME,
    PUPPETSERVER_DIR_NAME,
)


class HtmlConfig(BaseModel):
    """HTML rendering options."""

    model_config = ConfigDict(extra="forbid")

    table_class: str = Field(
        default=DEFAULT_TABLE_CLASS,
        description="CSS class attribute of the rendered <table>",
    )


class ComparisonConfig(BaseModel):
    """Baseline/candidate comparison options."""

    model_config = ConfigDict(extra="forbid")

    decimal_places: int = Field(default=2, ge=0, le=6)


class AtopConfig(BaseModel):
    """Atop CSV layout.

    ``marker`` is empty for exports that separate the summary and detail
    sections with a blank row. Otherwise it is the first cell of the heading
    row that starts the detail section.
    """

    model_config = ConfigDict(extra="forbid")

    marker: str = ""


class CollectorConfig(BaseModel):
    """puppet-metrics-collector layout and the metrics extracted from it."""

    model_config = ConfigDict(extra="forbid")

    dir_name: str = PUPPET_METRICS_COLLECTOR_DIR_NAME
    service_dir: str = PUPPETSERVER_DIR_NAME
    category: str = CATALOG_METRICS_CATEGORY
    fields: list[str] = Field(default_factory=lambda: list(CATALOG_METRIC_FIELDS))

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one metric field is required")
        if len(set(v)) != len(v):
            raise ValueError(f"duplicate metric fields: {v}")
        return v


class PerfResultsConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    output_dir: Path | None = None
    html: HtmlConfig = Field(default_factory=HtmlConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    atop: AtopConfig = Field(default_factory=AtopConfig)
    collector: CollectorConfig = Field(default_factory=CollectorConfig)
