"""Data models for the matching engine.

This module defines the per-signal scores, the per-product result and the
per-announcement aggregate returned by the rule-based matcher.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from bidflow.domain.models import ConfidenceTier, Recommendation


@dataclass
class SignalScore:
    """Outcome of one scorer for one product.

    Attributes:
        score: Points contributed by this signal
        reasons: Human-readable explanations, in evaluation order
        excluded: True when the signal vetoed the product (keyword exclusion)
        value: Signal-specific detail: strong keyword hit count for keywords,
            the diameter used for pipe size
    """

    score: int
    reasons: List[str] = field(default_factory=list)
    excluded: bool = False
    value: Optional[int] = None


@dataclass
class ScoreBreakdown:
    """The three sub-scores that add up to a product's total."""

    keyword_score: int = 0
    pipe_size_score: int = 0
    organization_score: int = 0

    @property
    def total(self) -> int:
        return self.keyword_score + self.pipe_size_score + self.organization_score


@dataclass
class MatchResult:
    """Result of scoring one announcement against one catalog product.

    Attributes:
        product_id: Catalog product identifier
        product_name: Display name of the product
        score: Total score (sum of the breakdown, 0 when excluded)
        breakdown: Keyword, pipe-size and organization sub-scores
        is_match: True if the product qualifies as a genuine match
        confidence: Confidence tier derived from the total score
        reasons: Human-readable explanations from every scorer that ran
        excluded: True if an exclusion keyword vetoed the product
        pipe_size_mm: Diameter the pipe-size score was based on, if any
    """

    product_id: str
    product_name: str
    score: int
    breakdown: ScoreBreakdown
    is_match: bool
    confidence: ConfidenceTier
    reasons: List[str] = field(default_factory=list)
    excluded: bool = False
    pipe_size_mm: Optional[int] = None


@dataclass
class MatchSet:
    """Every product's result for one announcement plus the triage outcome.

    Attributes:
        announcement_id: Identifier of the scored announcement
        catalog_version: Version label of the catalog used
        all_matches: One result per catalog product, highest score first;
            equal scores keep catalog order
        best_match: Highest-scoring result with is_match, or None
        recommendation: PROCEED if any product qualifies, SKIP otherwise
    """

    announcement_id: str
    catalog_version: str
    all_matches: List[MatchResult] = field(default_factory=list)
    best_match: Optional[MatchResult] = None
    recommendation: Recommendation = Recommendation.SKIP

    def get(self, product_id: str) -> Optional[MatchResult]:
        """Return the result for a product, or None if it is not in the catalog."""
        for result in self.all_matches:
            if result.product_id == product_id:
                return result
        return None

    @property
    def matched(self) -> List[MatchResult]:
        """Results that qualify as matches, highest score first."""
        return [result for result in self.all_matches if result.is_match]
