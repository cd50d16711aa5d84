"""Configuration loader for perfresults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import PerfResultsConfig


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when configuration file is not found."""

    pass


class ConfigParseError(ConfigError):
    """Raised when configuration file cannot be parsed."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dictionary.

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails or the top level is not a mapping
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse YAML in {path}: {e}")  # noqa: B904

    if not content:
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(f"Expected a mapping at the top level of {path}")
    return content


def load_config(path: str | Path | None = None) -> PerfResultsConfig:
    """Load and validate configuration.

    Args:
        path: Path to configuration YAML file. ``None`` returns the defaults.

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails
        ConfigValidationError: If validation fails
    """
    if path is None:
        return PerfResultsConfig()

    path = Path(path)
    data = load_yaml(path)

    try:
        return PerfResultsConfig.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        error_messages = []
        for err in errors:
            loc = ".".join(str(x) for x in err["loc"])
            error_messages.append(f"  - {loc}: {err['msg']}")

        raise ConfigValidationError(  # noqa: B904
            f"Configuration validation failed for {path}:\n" + "\n".join(error_messages),
            errors=[dict(e) for e in errors],  # type: ignore[call-overload]
        )



def generate_example_config_yaml() -> str:
    """Generate example configuration YAML with comments.

    Every option is shown commented-out with its default, so an empty file
    and this template behave identically until something is uncommented.
    """
    return """# perfresults configuration
# ========================
# Commented fields show their DEFAULT value, which stays active while the
# line is commented out.

# Directory for generated CSV/HTML files. When unset, files are written
# next to the results they were extracted from.
# output_dir: ./perf-output

## HTML rendering
# html:
#   table_class: "table table-bordered"

## Baseline vs. candidate comparison
# comparison:
#   decimal_places: 2

## Atop CSV exports
# An empty marker means a blank row separates the summary section from the
# detail section. Otherwise set it to the first cell of the detail heading.
# atop:
#   marker: ""

## puppet-metrics-collector archives
# collector:
#   dir_name: puppet_metrics_collector
#   service_dir: puppetserver
#   category: catalog-metrics
#   fields: [count, mean, aggregate]
"""
