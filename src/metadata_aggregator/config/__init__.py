"""Application configuration helpers."""

from __future__ import annotations

from .env import float_env_var, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .settings import (
    METADATA_CONTENT_TYPE,
    AggregatorSettings,
    ConfigLocation,
    SourceSettings,
    StoreSettings,
    get_aggregator_settings,
)

__all__ = [
    "METADATA_CONTENT_TYPE",
    "AggregatorSettings",
    "ConfigLocation",
    "ConfigurationError",
    "MissingConfigurationError",
    "SourceSettings",
    "StoreSettings",
    "configure_logging",
    "float_env_var",
    "get_aggregator_settings",
    "optional_env_var",
    "require_env_vars",
]
