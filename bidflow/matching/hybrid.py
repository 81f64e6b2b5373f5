"""Hybrid blend of rule-based scores with caller-supplied semantic similarity.

The semantic side (embeddings, vector store) lives outside this package.
Callers plug it in by implementing SimilaritySource; the blend itself is
plain arithmetic over the rule matcher's output.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from bidflow.config.models import Catalog
from bidflow.domain.models import Announcement, ConfidenceTier
from bidflow.logging import get_logger

from .engine import RuleBasedMatcher
from .models import MatchResult
from .utils import normalize_score

logger = get_logger(__name__, component="hybrid")

DEFAULT_RULE_WEIGHT = 0.6
DEFAULT_SEMANTIC_WEIGHT = 0.4


class HybridRecommendation(str, Enum):
    BID = "BID"
    REVIEW = "REVIEW"
    SKIP = "SKIP"


@dataclass(frozen=True)
class SimilarityHit:
    """One product returned by a similarity search.

    Attributes:
        product_id: Catalog product identifier
        similarity: Cosine-style similarity in 0..1
    """

    product_id: str
    similarity: float


class SimilaritySource(ABC):
    """Base class for semantic similarity backends.

    Implementations wrap whatever embedding and vector search the caller
    runs and must implement search().
    """

    @abstractmethod
    def search(self, announcement: Announcement, limit: int) -> List[SimilarityHit]:
        """Return up to `limit` products most similar to the announcement."""


@dataclass
class HybridMatchResult:
    """Blended score for one product.

    Attributes:
        product_id: Catalog product identifier
        product_name: Display name
        rule_score: Raw rule-based total
        rule_normalized: Rule total scaled to 0-100
        semantic_score: Similarity scaled to 0-100 (0 if not returned)
        combined_score: Weighted blend, 0-100
        confidence: Tier of the combined score
        recommendation: BID, REVIEW or SKIP
        rule_result: Underlying rule-based result
    """

    product_id: str
    product_name: str
    rule_score: int
    rule_normalized: int
    semantic_score: float
    combined_score: float
    confidence: ConfidenceTier
    recommendation: HybridRecommendation
    rule_result: MatchResult


def classify_combined(score: float) -> ConfidenceTier:
    if score >= 80:
        return ConfidenceTier.HIGH
    if score >= 60:
        return ConfidenceTier.MEDIUM
    if score >= 40:
        return ConfidenceTier.LOW
    return ConfidenceTier.NONE


def recommend(score: float) -> HybridRecommendation:
    if score >= 70:
        return HybridRecommendation.BID
    if score >= 50:
        return HybridRecommendation.REVIEW
    return HybridRecommendation.SKIP


def overall_recommendation(results: List[HybridMatchResult]) -> HybridRecommendation:
    """Recommendation for the whole announcement, taken from the best combined score.

    An empty result list (empty catalog) is SKIP.
    """
    if not results:
        return HybridRecommendation.SKIP
    return recommend(max(result.combined_score for result in results))


class HybridMatcher:
    """Blends rule-based totals with semantic similarity per product.

    combined = rule_normalized * rule_weight + similarity * 100 * semantic_weight

    Excluded products stay at 0 regardless of similarity. If the similarity
    source fails, the failure is logged and every semantic score is 0.
    """

    def __init__(
        self,
        catalog: Catalog,
        similarity_source: SimilaritySource,
        rule_weight: float = DEFAULT_RULE_WEIGHT,
        semantic_weight: float = DEFAULT_SEMANTIC_WEIGHT,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize HybridMatcher.

        Args:
            catalog: Catalog to score against
            similarity_source: Semantic backend
            rule_weight: Weight of the normalized rule score
            semantic_weight: Weight of the similarity score
            logger_instance: Optional logger instance (defaults to module logger)

        Raises:
            ValueError: If a weight is negative or the weights do not sum to 1
        """
        if rule_weight < 0 or semantic_weight < 0:
            raise ValueError("Hybrid weights must be non-negative")
        if abs(rule_weight + semantic_weight - 1.0) > 1e-9:
            raise ValueError(
                f"Hybrid weights must sum to 1.0, got {rule_weight + semantic_weight}"
            )

        self.catalog = catalog
        self.similarity_source = similarity_source
        self.rule_weight = rule_weight
        self.semantic_weight = semantic_weight
        self.logger = logger_instance or logger
        self.rule_matcher = RuleBasedMatcher(catalog, logger_instance=logger_instance)

    def match(self, announcement: Announcement) -> List[HybridMatchResult]:
        """Score every catalog product with the blended formula.

        Returns:
            One result per product, highest combined score first
        """
        match_set = self.rule_matcher.match(announcement)
        similarities = self._fetch_similarities(announcement)
        max_total = self.catalog.max_total_score

        results = []
        for rule_result in match_set.all_matches:
            rule_normalized = normalize_score(rule_result.score, max_total)
            if rule_result.excluded:
                semantic = 0.0
                combined = 0.0
            else:
                semantic = round(similarities.get(rule_result.product_id, 0.0) * 100, 2)
                combined = round(
                    rule_normalized * self.rule_weight + semantic * self.semantic_weight, 2
                )

            results.append(
                HybridMatchResult(
                    product_id=rule_result.product_id,
                    product_name=rule_result.product_name,
                    rule_score=rule_result.score,
                    rule_normalized=rule_normalized,
                    semantic_score=semantic,
                    combined_score=combined,
                    confidence=classify_combined(combined),
                    recommendation=recommend(combined),
                    rule_result=rule_result,
                )
            )

        results.sort(key=lambda result: result.combined_score, reverse=True)
        return results

    def recommend(self, announcement: Announcement) -> HybridRecommendation:
        """Score the announcement and return one BID, REVIEW or SKIP verdict for it."""
        return overall_recommendation(self.match(announcement))

    def _fetch_similarities(self, announcement: Announcement) -> Dict[str, float]:
        limit = len(self.catalog.products)
        if limit == 0:
            return {}

        try:
            hits = self.similarity_source.search(announcement, limit)
        except Exception as e:
            self.logger.warning(
                f"Similarity search failed, using rule scores only: {e}",
                extra={
                    "event": "hybrid.similarity.failed",
                    "announcement_id": announcement.id,
                    "error_type": type(e).__name__,
                },
            )
            return {}

        similarities: Dict[str, float] = {}
        for hit in hits:
            value = max(0.0, min(1.0, float(hit.similarity)))
            # Keep the best similarity when a source repeats a product
            if value > similarities.get(hit.product_id, -1.0):
                similarities[hit.product_id] = value
        return similarities
