"""Utility functions for preparing match results for downstream consumers.

This module provides helpers for batch matching, aggregate statistics,
human-readable summaries and JSON-ready payloads.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from bidflow.config.models import Catalog
from bidflow.domain.models import Announcement, ConfidenceTier, Recommendation

from .engine import RuleBasedMatcher
from .models import MatchResult, MatchSet

SUMMARY_TOP_RESULTS = 3


def normalize_score(score: int, max_score: int) -> int:
    """Scale a raw score onto 0-100, clamped and rounded.

    Args:
        score: Raw score
        max_score: Score that maps to 100

    Returns:
        Integer percentage; 0 when max_score is not positive
    """
    if max_score <= 0:
        return 0
    percent = round(score / max_score * 100)
    return max(0, min(100, percent))


def confidence_ratio(result: MatchResult) -> float:
    """Express a result's confidence as a ratio in 0..1.

    The tier picks a band and the score positions the ratio inside it, so
    results in a higher tier always rank above those in a lower one.
    """
    score = result.score
    if result.confidence == ConfidenceTier.HIGH:
        ratio = 0.9 + min(score / 200, 1.0) * 0.1
    elif result.confidence == ConfidenceTier.MEDIUM:
        ratio = 0.7 + min(score / 100, 1.0) * 0.15
    elif result.confidence == ConfidenceTier.LOW:
        ratio = 0.4 + min(score / 50, 1.0) * 0.2
    else:
        ratio = 0.1 + min(score / 30, 1.0) * 0.2
    return round(min(ratio, 1.0), 4)


def batch_match(announcements: Iterable[Announcement], catalog: Catalog) -> List[MatchSet]:
    """Match several announcements against one catalog.

    Args:
        announcements: Announcements to evaluate
        catalog: Catalog to score against

    Returns:
        One MatchSet per announcement, in input order
    """
    matcher = RuleBasedMatcher(catalog)
    return [matcher.match(announcement) for announcement in announcements]


@dataclass
class MatchingStats:
    """Aggregate figures over a batch of match sets.

    Attributes:
        total: Number of announcements evaluated
        proceed_count: Announcements with a PROCEED recommendation
        match_rate: proceed_count / total (0.0 for an empty batch)
        best_match_counts: product_id -> number of times it was the best match
        confidence_counts: tier value -> number of best matches in that tier
        average_best_score: Mean score of the best matches (0.0 when none)
    """

    total: int = 0
    proceed_count: int = 0
    match_rate: float = 0.0
    best_match_counts: Dict[str, int] = field(default_factory=dict)
    confidence_counts: Dict[str, int] = field(default_factory=dict)
    average_best_score: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "proceed_count": self.proceed_count,
            "match_rate": self.match_rate,
            "best_match_counts": dict(self.best_match_counts),
            "confidence_counts": dict(self.confidence_counts),
            "average_best_score": self.average_best_score,
        }


def calculate_matching_stats(match_sets: List[MatchSet]) -> MatchingStats:
    """Compute aggregate statistics for a batch of match sets."""
    best_matches = [ms.best_match for ms in match_sets if ms.best_match is not None]
    total = len(match_sets)
    proceed_count = len(
        [ms for ms in match_sets if ms.recommendation == Recommendation.PROCEED]
    )

    product_counter = Counter(result.product_id for result in best_matches)
    tier_counter = Counter(result.confidence.value for result in best_matches)

    average = (
        round(sum(result.score for result in best_matches) / len(best_matches), 2)
        if best_matches
        else 0.0
    )

    return MatchingStats(
        total=total,
        proceed_count=proceed_count,
        match_rate=round(proceed_count / total, 4) if total else 0.0,
        best_match_counts=dict(product_counter.most_common()),
        confidence_counts=dict(tier_counter),
        average_best_score=average,
    )


def generate_match_summary(match_set: MatchSet) -> str:
    """Generate a human-readable report for one announcement.

    Example output:
        Announcement: BID-001
        Recommendation: PROCEED
        Best match: UR-1000PLUS (score 101, high confidence)

        Top results:
          1. UR-1000PLUS  101  high  [match]
             - strong keyword matched: 초음파유량계
             ...
    """
    lines = []
    lines.append(f"Announcement: {match_set.announcement_id or '(no id)'}")
    lines.append(f"Catalog version: {match_set.catalog_version}")
    lines.append(f"Recommendation: {match_set.recommendation.value.upper()}")

    best = match_set.best_match
    if best:
        lines.append(
            f"Best match: {best.product_id} "
            f"(score {best.score}, {best.confidence.value} confidence)"
        )
    else:
        lines.append("Best match: none")

    if not match_set.all_matches:
        lines.append("")
        lines.append("No products in catalog")
        return "\n".join(lines)

    lines.append("")
    lines.append("Top results:")
    for position, result in enumerate(match_set.all_matches[:SUMMARY_TOP_RESULTS], start=1):
        if result.excluded:
            marker = "[excluded]"
        elif result.is_match:
            marker = "[match]"
        else:
            marker = ""
        lines.append(
            f"  {position}. {result.product_id:<12} {result.score:>3}  "
            f"{result.confidence.value:<6} {marker}".rstrip()
        )
        for reason in result.reasons:
            lines.append(f"     - {reason}")

    return "\n".join(lines)


def build_rationale_dict(result: MatchResult) -> Dict:
    """Build a lightweight rationale dict for one product result.

    Returns:
        Dict with the total, sub-scores, decision and reasons
    """
    return {
        "product_id": result.product_id,
        "product_name": result.product_name,
        "score": result.score,
        "breakdown": {
            "keyword": result.breakdown.keyword_score,
            "pipe_size": result.breakdown.pipe_size_score,
            "organization": result.breakdown.organization_score,
        },
        "is_match": result.is_match,
        "confidence": result.confidence.value,
        "confidence_ratio": confidence_ratio(result),
        "excluded": result.excluded,
        "pipe_size_mm": result.pipe_size_mm,
        "reasons": list(result.reasons),
    }


def build_match_payload(match_set: MatchSet) -> Dict:
    """Build a JSON-ready payload for a whole match set."""
    return {
        "announcement_id": match_set.announcement_id,
        "catalog_version": match_set.catalog_version,
        "recommendation": match_set.recommendation.value,
        "best_match": (
            build_rationale_dict(match_set.best_match) if match_set.best_match else None
        ),
        "matches": [build_rationale_dict(result) for result in match_set.all_matches],
    }
