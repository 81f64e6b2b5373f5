"""Hashing utilities for result caching.

The matcher does not cache or version its own output. Callers that cache
MatchSets key them with compute_cache_key(), which covers both the exact
announcement text and the catalog the result was computed against.
"""

import hashlib

from bidflow.config.models import Catalog
from bidflow.domain.models import Announcement


def hash_string(value: str) -> str:
    """Compute the SHA256 hex digest (64 characters) of a string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def compute_catalog_fingerprint(catalog: Catalog) -> str:
    """Fingerprint a catalog's full content.

    Two catalogs with the same version label but different keywords,
    weights or thresholds get different fingerprints.

    Returns:
        Hexadecimal SHA256 digest
    """
    return hash_string(catalog.model_dump_json())


def compute_cache_key(announcement: Announcement, catalog: Catalog) -> str:
    """Compute a cache key for the MatchSet of (announcement, catalog).

    Text fields are hashed exactly as given. Diameter extraction reads the
    raw text, so inputs that differ only in punctuation or spacing can
    score differently and must not share a key.

    Example:
        >>> key = compute_cache_key(Announcement(title="전자유량계 구매"), catalog)
        >>> len(key)
        64
    """
    price = "" if announcement.estimated_price is None else repr(float(announcement.estimated_price))
    composite = "\n".join(
        [
            catalog.version,
            compute_catalog_fingerprint(catalog),
            announcement.id,
            announcement.title,
            announcement.organization,
            announcement.description or "",
            price,
        ]
    )
    return hash_string(composite)
