"""Additional validation utilities for catalog files."""

import warnings
from typing import Any, Dict, List


def _as_terms(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [term.strip().lower() for term in value if isinstance(term, str) and term.strip()]


def check_catalog_warnings(catalog_dict: Dict[str, Any]) -> List[str]:
    """
    Check a raw catalog for suspicious but valid settings.

    Args:
        catalog_dict: Raw catalog dictionary as read from YAML

    Returns:
        List of warning messages
    """
    warning_messages = []

    products = catalog_dict.get("products") or []
    if isinstance(products, list) and not products:
        warning_messages.append("Catalog defines no products; every announcement will be skipped")

    for product in products if isinstance(products, list) else []:
        if not isinstance(product, dict):
            continue
        product_id = product.get("id", "Unknown")

        strong = _as_terms(product.get("strong_keywords"))
        weak = _as_terms(product.get("weak_keywords"))
        exclude = _as_terms(product.get("exclude_keywords"))

        # A keyword that is both scored and excluded can never contribute points
        conflicts = (set(strong) | set(weak)) & set(exclude)
        if conflicts:
            warning_messages.append(
                f"Product '{product_id}' lists keywords as both scoring and excluded: "
                f"{', '.join(sorted(conflicts))}"
            )

        for field_name, terms in (
            ("strong_keywords", strong),
            ("weak_keywords", weak),
            ("exclude_keywords", exclude),
        ):
            if len(terms) != len(set(terms)):
                duplicates = sorted({term for term in terms if terms.count(term) > 1})
                warning_messages.append(
                    f"Duplicate terms in {product_id}.{field_name} will be deduplicated: "
                    f"{', '.join(duplicates)}"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
