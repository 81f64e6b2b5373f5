"""Utility functions for text normalization and cache keys."""

from .hashing import compute_cache_key, compute_catalog_fingerprint, hash_string
from .text import normalize_for_matching

__all__ = [
    "compute_cache_key",
    "compute_catalog_fingerprint",
    "hash_string",
    "normalize_for_matching",
]
