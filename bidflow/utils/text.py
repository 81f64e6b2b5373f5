"""Text helpers shared by the scorers."""

import re

_WHITESPACE = re.compile(r"\s+")
# Hyphens are kept: "k-water" is an organization fragment
_PUNCTUATION = re.compile(r"[,;.!?()\[\]{}\"'<>]")


def normalize_for_matching(text: str) -> str:
    """Normalize text for substring keyword matching.

    Normalization steps:
    - Convert to lowercase
    - Replace common punctuation with spaces
    - Collapse runs of whitespace and strip the ends

    No tokenization happens: keywords are later tested with plain ``in``.

    Example:
        >>> normalize_for_matching("[긴급]  초음파유량계 구매!!! (DN-1000)")
        '긴급 초음파유량계 구매 dn-1000'
    """
    if not text:
        return ""

    normalized = _PUNCTUATION.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", normalized).strip()
