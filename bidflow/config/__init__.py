"""Catalog and runtime configuration for the BIDFLOW matcher."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_catalog, load_default_catalog, validate_catalog_file
from .models import (
    Catalog,
    LogFormat,
    LogLevel,
    MatchThresholds,
    OrganizationTiers,
    PipeSizeRange,
    Product,
    ScoringWeights,
)

__all__ = [
    # Loader functions
    "load_catalog",
    "load_default_catalog",
    "validate_catalog_file",
    "load_environment_config",
    # Catalog models
    "Catalog",
    "Product",
    "PipeSizeRange",
    "OrganizationTiers",
    "ScoringWeights",
    "MatchThresholds",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
