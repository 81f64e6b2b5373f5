"""Catalog loader for the BIDFLOW matcher."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import Catalog
from .validators import check_catalog_warnings, emit_warnings

DEFAULT_CATALOG_PATH = Path(__file__).parent / "default_catalog.yaml"

CATALOG_PATH_ENV_VAR = "BIDFLOW_CATALOG_PATH"


def load_catalog(catalog_path: Optional[Path] = None) -> Catalog:
    """
    Load and validate a product catalog from a YAML file.

    Implements fallback logic for the catalog location:
    1. Use provided catalog_path if given
    2. Use the path in BIDFLOW_CATALOG_PATH if set
    3. Try catalog.yaml in current directory
    4. Try ./config/catalog.yaml
    5. Fall back to the packaged default catalog

    Args:
        catalog_path: Optional path to a catalog file

    Returns:
        Validated Catalog

    Raises:
        ConfigurationError: If the catalog file is missing, unparseable or invalid
    """
    catalog_file = _find_catalog_file(catalog_path)
    catalog_dict = _read_yaml(catalog_file)

    warnings = check_catalog_warnings(catalog_dict)
    if warnings:
        emit_warnings(warnings)

    return _validate_catalog(catalog_dict, catalog_file)


def load_default_catalog() -> Catalog:
    """Load the catalog shipped with the package."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def _read_yaml(catalog_file: Path) -> Dict[str, Any]:
    try:
        with open(catalog_file, "r", encoding="utf-8") as f:
            catalog_dict = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Catalog file not found: {catalog_file}",
            suggestions=[
                f"Ensure {catalog_file} exists and is readable",
                "Omit --catalog to use the packaged default catalog",
            ],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML catalog: {e}",
            suggestions=[
                "Check YAML syntax in your catalog file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read catalog file: {e}",
            suggestions=[
                f"Ensure {catalog_file} is readable",
                "Check file permissions",
            ],
        )

    if not catalog_dict:
        raise ConfigurationError(
            "Catalog file is empty",
            suggestions=["Copy the packaged default_catalog.yaml as a starting point"],
        )

    if not isinstance(catalog_dict, dict):
        raise ConfigurationError(
            "Catalog file must contain a mapping at the top level",
            errors=[f"Got {type(catalog_dict).__name__}"],
            suggestions=["Start the file with keys such as 'version' and 'products'"],
        )

    return catalog_dict


def _validate_catalog(catalog_dict: Dict[str, Any], catalog_file: Path) -> Catalog:
    try:
        return Catalog.model_validate(catalog_dict)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            error_msg = error["msg"]
            error_type = error["type"]

            if error_type == "missing":
                errors.append(f"Missing required field: {field_path}")
            elif error_type in ["string_type", "int_type", "float_type", "tuple_type"]:
                expected_type = error_type.replace("_type", "")
                errors.append(
                    f"Invalid type for '{field_path}': expected {expected_type}, "
                    f"got {error.get('input')}"
                )
            else:
                errors.append(f"{field_path}: {error_msg}" if field_path else error_msg)

        raise ConfigurationError(
            f"Catalog validation failed: {catalog_file}",
            errors=errors,
            suggestions=[
                "Compare your catalog with the packaged default_catalog.yaml",
                "Check that every product has an id, name, category, pipe_size "
                "and at least one strong keyword",
            ],
        )


def _find_catalog_file(catalog_path: Optional[Path] = None) -> Path:
    """
    Find the catalog file using fallback logic.

    Args:
        catalog_path: Optional explicit path to a catalog file

    Returns:
        Path to the catalog file

    Raises:
        ConfigurationError: If an explicitly requested file does not exist
    """
    if catalog_path:
        if not catalog_path.exists():
            raise ConfigurationError(
                f"Specified catalog file not found: {catalog_path}",
                suggestions=[
                    f"Ensure {catalog_path} exists",
                    "Check the path and try again",
                ],
            )
        return catalog_path

    env_path = os.getenv(CATALOG_PATH_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        if not candidate.exists():
            raise ConfigurationError(
                f"Catalog file from {CATALOG_PATH_ENV_VAR} not found: {candidate}",
                suggestions=[f"Fix or unset {CATALOG_PATH_ENV_VAR}"],
            )
        return candidate

    for candidate in (Path("catalog.yaml"), Path("config") / "catalog.yaml"):
        if candidate.exists():
            return candidate

    return DEFAULT_CATALOG_PATH


def validate_catalog_file(catalog_path: Path) -> bool:
    """
    Validate a catalog file and print the verdict.

    Args:
        catalog_path: Path to the catalog file

    Returns:
        True if valid, False otherwise (errors printed)
    """
    try:
        catalog = load_catalog(catalog_path)
    except ConfigurationError as e:
        print(f"✗ Catalog validation failed:\n{e}")
        return False

    print(
        f"✓ Catalog {catalog_path} is valid "
        f"(version {catalog.version}, {len(catalog.products)} products)"
    )
    return True
