"""perfresults configuration module."""

from .loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    generate_example_config_yaml,
    load_config,
)
from .schema import (
    AtopConfig,
    CollectorConfig,
    ComparisonConfig,
    HtmlConfig,
    PerfResultsConfig,
)

__all__ = [
    # Config classes
    "PerfResultsConfig",
    "HtmlConfig",
    "ComparisonConfig",
    "AtopConfig",
    "CollectorConfig",
    # Loader functions
    "load_config",
    "generate_example_config_yaml",
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
