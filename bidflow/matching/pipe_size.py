"""Pipe diameter extraction and range scoring.

Announcements state nominal diameters in several notations. Every mention
is extracted; each product then scores the mention that fits it best.
"""

import re
from typing import List, Tuple

from bidflow.config.models import Product, ScoringWeights

from .models import SignalScore

MIN_DIAMETER_MM = 1
MAX_DIAMETER_MM = 10000

NO_PIPE_SIZE_REASON = "no pipe size specified"

# 300, or 1,200 with a thousands separator
_NUMBER = r"(\d,\d{3}(?!\d)|\d{1,5})"

_DIAMETER_PATTERNS = (
    # DN 1000, DN1000, DN-1000, dn:300, DN 1,200, and ranges such as DN300~1000
    re.compile(
        r"(?<![a-z])dn\s*[-:.]?\s*" + _NUMBER + r"(?:\s*[~∼\-]\s*(?:dn\s*)?" + _NUMBER + r")?",
        re.IGNORECASE,
    ),
    # Φ300, φ300, Ø300
    re.compile(r"[φΦøØ⌀]\s*" + _NUMBER),
    # 300mm, 300 ㎜, 1,200mm
    re.compile(r"(?<![\d.,])" + _NUMBER + r"\s*(?:mm|㎜)(?![a-z])", re.IGNORECASE),
    # 구경 300, 관경: 300, 호칭경 300
    re.compile(r"(?:호칭경|구경|관경)\s*[:=]?\s*" + _NUMBER),
)


def _to_mm(raw: str) -> int:
    return int(raw.replace(",", ""))


def extract_pipe_sizes(text: str) -> List[int]:
    """Extract nominal pipe diameters (mm) from free text.

    Runs on raw text so decimal points and punctuation are still intact.

    Args:
        text: Announcement text

    Returns:
        Distinct diameters in order of first appearance; values outside
        1-10000 mm are dropped

    Example:
        >>> extract_pipe_sizes("규격: DN 1000, DN 1200 (Φ300)")
        [1000, 1200, 300]
    """
    if not text:
        return []

    found: List[Tuple[int, int]] = []
    for pattern in _DIAMETER_PATTERNS:
        for match in pattern.finditer(text):
            start = _to_mm(match.group(1))
            found.append((match.start(1), start))
            if pattern.groups > 1 and match.group(2) is not None:
                end = _to_mm(match.group(2))
                # Ranges run upward; "DN 100-2대" is a quantity, not a range end
                if end >= start:
                    found.append((match.start(2), end))

    sizes: List[int] = []
    for _, value in sorted(found):
        if MIN_DIAMETER_MM <= value <= MAX_DIAMETER_MM and value not in sizes:
            sizes.append(value)
    return sizes


class PipeSizeScorer:
    """Scores extracted diameters against a product's supported range."""

    def __init__(self, weights: ScoringWeights):
        self.weights = weights

    def score(self, sizes: List[int], product: Product) -> SignalScore:
        """Score the best-fitting diameter for a product.

        When several diameters are mentioned, the one with the highest score
        wins; among equal scores the earliest mention wins.

        Args:
            sizes: Diameters from extract_pipe_sizes(), in order of appearance
            product: Product whose range applies

        Returns:
            SignalScore whose value is the diameter used (None if no mention)
        """
        if not sizes:
            return SignalScore(score=0, reasons=[NO_PIPE_SIZE_REASON])

        best_score, best_reason, best_size = -1, "", None
        for size in sizes:
            points, reason = self._score_size(size, product)
            if points > best_score:
                best_score, best_reason, best_size = points, reason, size

        return SignalScore(score=best_score, reasons=[best_reason], value=best_size)

    def _score_size(self, size: int, product: Product) -> Tuple[int, str]:
        size_range = product.pipe_size
        label = size_range.label()

        if size_range.contains(size):
            return self.weights.pipe_size_max, f"DN{size} within supported range {label}"

        tolerance = self.weights.pipe_size_tolerance
        near_below = size_range.min_mm * (1 - tolerance) <= size < size_range.min_mm
        near_above = size_range.max_mm < size <= size_range.max_mm * (1 + tolerance)
        if near_below or near_above:
            return self.weights.pipe_size_partial, f"DN{size} near supported range {label}"

        return 0, f"DN{size} outside supported range {label}"
