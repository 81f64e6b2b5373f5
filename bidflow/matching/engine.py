"""Rule-based matching engine for scoring announcements against a catalog.

This module implements the matching logic that:
1. Scores every catalog product on keywords, pipe size and organization
2. Classifies each total into a confidence tier and a match decision
3. Ranks the products and picks the best match and a recommendation

The engine has no I/O and keeps no state between calls, so one instance can
serve any number of threads.
"""

import logging
from typing import List, Optional

from bidflow.config.models import Catalog, MatchThresholds, Product
from bidflow.domain.models import Announcement, ConfidenceTier, Recommendation
from bidflow.logging import get_logger
from bidflow.logging.context import log_context
from bidflow.utils.text import normalize_for_matching

from .keywords import KeywordScorer
from .models import MatchResult, MatchSet, ScoreBreakdown
from .organization import OrganizationScorer
from .pipe_size import PipeSizeScorer, extract_pipe_sizes

logger = get_logger(__name__, component="matching")


def classify_confidence(score: int, thresholds: MatchThresholds) -> ConfidenceTier:
    """Map a total score to a confidence tier.

    Tiers only depend on the score, so a higher score never yields a lower
    tier.
    """
    if score >= thresholds.high:
        return ConfidenceTier.HIGH
    if score >= thresholds.medium:
        return ConfidenceTier.MEDIUM
    if score >= thresholds.low:
        return ConfidenceTier.LOW
    return ConfidenceTier.NONE


class RuleBasedMatcher:
    """Evaluates announcements against every product in a catalog.

    Responsibilities:
    - Veto products whose exclusion keywords appear
    - Sum keyword, pipe-size and organization sub-scores
    - Decide is_match: total at or above the qualifying threshold and at
      least one strong keyword hit
    - Rank results and pick the best match
    """

    def __init__(self, catalog: Catalog, logger_instance: Optional[logging.Logger] = None):
        """Initialize RuleBasedMatcher.

        Args:
            catalog: Catalog with products, organization tiers, weights and thresholds
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.catalog = catalog
        self.logger = logger_instance or logger
        self.keyword_scorer = KeywordScorer(catalog.scoring)
        self.pipe_size_scorer = PipeSizeScorer(catalog.scoring)
        self.organization_scorer = OrganizationScorer(catalog.organizations)

    def match(self, announcement: Announcement) -> MatchSet:
        """Score an announcement against every catalog product.

        Args:
            announcement: Announcement to evaluate

        Returns:
            MatchSet with one result per product, best match and recommendation
        """
        with log_context(
            announcement_id=announcement.id, catalog_version=self.catalog.version
        ):
            text = normalize_for_matching(announcement.combined_text)
            sizes = extract_pipe_sizes(announcement.combined_text)

            results = [
                self.evaluate_product(product, text, sizes, announcement.organization)
                for product in self.catalog.products
            ]

            # sorted() is stable: equal scores keep catalog order
            ranked = sorted(results, key=lambda result: result.score, reverse=True)
            best_match = next((result for result in ranked if result.is_match), None)
            recommendation = Recommendation.PROCEED if best_match else Recommendation.SKIP

            if best_match:
                self.logger.info(
                    f"Announcement matched: {best_match.product_id}",
                    extra={
                        "event": "matching.announcement.matched",
                        "best_match": best_match.product_id,
                        "score": best_match.score,
                        "confidence": best_match.confidence.value,
                        "matched_count": len([r for r in ranked if r.is_match]),
                        "product_count": len(ranked),
                    },
                )
            else:
                self.logger.debug(
                    "Announcement did not match any product",
                    extra={
                        "event": "matching.announcement.skipped",
                        "top_score": ranked[0].score if ranked else 0,
                        "product_count": len(ranked),
                    },
                )

            return MatchSet(
                announcement_id=announcement.id,
                catalog_version=self.catalog.version,
                all_matches=ranked,
                best_match=best_match,
                recommendation=recommendation,
            )

    def evaluate_product(
        self, product: Product, text: str, sizes: List[int], organization: str
    ) -> MatchResult:
        """Score one product.

        Algorithm:
        1. Keyword scorer; an exclusion hit returns a zero result immediately
        2. Pipe-size scorer on the pre-extracted diameters
        3. Organization scorer
        4. Total, confidence tier and match decision

        Args:
            product: Catalog product
            text: Normalized announcement text
            sizes: Diameters extracted from the raw announcement text
            organization: Raw organization name

        Returns:
            MatchResult for the product
        """
        keyword_signal = self.keyword_scorer.score(text, product)

        if keyword_signal.excluded:
            self.logger.debug(
                f"Product excluded: {product.id}",
                extra={
                    "event": "matching.product.excluded",
                    "product_id": product.id,
                    "reason": keyword_signal.reasons[0],
                },
            )
            return MatchResult(
                product_id=product.id,
                product_name=product.name,
                score=0,
                breakdown=ScoreBreakdown(),
                is_match=False,
                confidence=ConfidenceTier.NONE,
                reasons=list(keyword_signal.reasons),
                excluded=True,
            )

        pipe_signal = self.pipe_size_scorer.score(sizes, product)
        organization_signal = self.organization_scorer.score(organization, product)

        breakdown = ScoreBreakdown(
            keyword_score=keyword_signal.score,
            pipe_size_score=pipe_signal.score,
            organization_score=organization_signal.score,
        )
        total = breakdown.total
        confidence = classify_confidence(total, self.catalog.thresholds)
        is_match = total >= self.catalog.thresholds.qualifying and bool(keyword_signal.value)

        reasons = keyword_signal.reasons + pipe_signal.reasons + organization_signal.reasons

        self.logger.debug(
            f"Product scored: {product.id}",
            extra={
                "event": "matching.product.scored",
                "product_id": product.id,
                "score": total,
                "keyword_score": breakdown.keyword_score,
                "pipe_size_score": breakdown.pipe_size_score,
                "organization_score": breakdown.organization_score,
                "is_match": is_match,
            },
        )

        return MatchResult(
            product_id=product.id,
            product_name=product.name,
            score=total,
            breakdown=breakdown,
            is_match=is_match,
            confidence=confidence,
            reasons=reasons,
            pipe_size_mm=pipe_signal.value,
        )


def match(announcement: Announcement, catalog: Catalog) -> MatchSet:
    """Score an announcement against a catalog.

    Deterministic and side-effect free apart from logging: identical
    inputs always produce equal MatchSets.

    Args:
        announcement: Announcement to evaluate
        catalog: Catalog to score against

    Returns:
        MatchSet for the announcement
    """
    return RuleBasedMatcher(catalog).match(announcement)
