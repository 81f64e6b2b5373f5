"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .loader import CATALOG_PATH_ENV_VAR
from .models import LogFormat, LogLevel


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        log_format: Optional[str] = None,
        environment: Optional[str] = None,
        catalog_path: Optional[Path] = None,
    ):
        self.log_level = log_level or LogLevel.INFO.value
        self.log_format = log_format or LogFormat.KEY_VALUE.value
        self.environment = environment or "local"
        self.catalog_path = catalog_path


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
    - LOG_FORMAT: json or key-value (default: key-value)
    - ENVIRONMENT: Environment label attached to every log record (default: local)
    - BIDFLOW_CATALOG_PATH: Catalog file to use instead of the packaged default

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    log_format = os.getenv("LOG_FORMAT")
    environment = os.getenv("ENVIRONMENT")
    catalog_path_str = os.getenv(CATALOG_PATH_ENV_VAR)

    if log_level:
        valid_levels = [level.value for level in LogLevel]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )
        else:
            log_level = log_level.upper()

    if log_format:
        valid_formats = [fmt.value for fmt in LogFormat]
        if log_format.lower() not in valid_formats:
            errors.append(
                f"Invalid LOG_FORMAT: '{log_format}'. Must be one of: {', '.join(valid_formats)}"
            )
        else:
            log_format = log_format.lower()

    catalog_path = None
    if catalog_path_str:
        catalog_path = Path(catalog_path_str)
        if not catalog_path.exists():
            errors.append(f"{CATALOG_PATH_ENV_VAR} points to a missing file: {catalog_path}")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level,
        log_format=log_format,
        environment=environment,
        catalog_path=catalog_path,
    )
