"""Win-likelihood estimate for an announcement.

Blends how well the catalog fits the announcement with two coarse market
signals: contract size (competition) and the issuing organization's tier
(track record). The result is a 0-100 figure for triage, not a probability.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from bidflow.config.models import Catalog
from bidflow.domain.models import Announcement

from .engine import RuleBasedMatcher
from .models import MatchSet
from .organization import TIER_HIGH, TIER_PUBLIC, OrganizationScorer

MATCH_WEIGHT = 0.6
COMPETITION_WEIGHT = 0.2
HISTORY_WEIGHT = 0.2

# (minimum estimated price in KRW, competition factor), checked top-down
COMPETITION_BRACKETS = (
    (500_000_000, 0.8),
    (100_000_000, 0.6),
    (50_000_000, 0.5),
)
COMPETITION_UNKNOWN = 0.5
COMPETITION_SMALL = 0.3

HISTORY_FACTORS = {TIER_HIGH: 0.8, TIER_PUBLIC: 0.6}
HISTORY_DEFAULT = 0.5


@dataclass
class WinScoreBreakdown:
    """Weighted parts of a win-likelihood estimate.

    Attributes:
        score: Final 0-100 estimate
        match_component: Weighted match fit, in points
        competition_component: Weighted competition factor, in points
        history_component: Weighted organization history factor, in points
        confidence: "high", "medium" or "low"
        best_product_id: Product the estimate is based on, if any
        reasons: Human-readable explanations
    """

    score: int
    match_component: float = 0.0
    competition_component: float = 0.0
    history_component: float = 0.0
    confidence: str = "low"
    best_product_id: Optional[str] = None
    reasons: List[str] = field(default_factory=list)


def competition_factor(estimated_price: Optional[float]) -> float:
    """Larger contracts score higher; a missing price is neutral."""
    if estimated_price is None:
        return COMPETITION_UNKNOWN
    for minimum, factor in COMPETITION_BRACKETS:
        if estimated_price >= minimum:
            return factor
    return COMPETITION_SMALL


def _confidence_label(score: int) -> str:
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


def get_win_score_breakdown(
    announcement: Announcement,
    catalog: Catalog,
    match_set: Optional[MatchSet] = None,
) -> WinScoreBreakdown:
    """Estimate the win likelihood and explain each part.

    Args:
        announcement: Announcement to assess
        catalog: Catalog to match against
        match_set: Existing match set for the announcement, to avoid
            matching twice

    Returns:
        WinScoreBreakdown; score 0 when no product matches
    """
    if match_set is None:
        match_set = RuleBasedMatcher(catalog).match(announcement)

    best = match_set.best_match
    if best is None:
        return WinScoreBreakdown(score=0, reasons=["no matching product"])

    max_total = catalog.max_total_score
    fit = best.score / max_total if max_total else 0.0
    competition = competition_factor(announcement.estimated_price)

    tier, _ = OrganizationScorer(catalog.organizations).classify(
        announcement.organization, catalog.get_product(best.product_id)
    )
    history = HISTORY_FACTORS.get(tier, HISTORY_DEFAULT)

    match_component = fit * MATCH_WEIGHT * 100
    competition_component = competition * COMPETITION_WEIGHT * 100
    history_component = history * HISTORY_WEIGHT * 100
    score = round(match_component + competition_component + history_component)
    score = max(0, min(100, score))

    if announcement.estimated_price is None:
        price_reason = "estimated price unknown"
    else:
        price_reason = f"estimated price {announcement.estimated_price:,.0f}"

    return WinScoreBreakdown(
        score=score,
        match_component=round(match_component, 2),
        competition_component=round(competition_component, 2),
        history_component=round(history_component, 2),
        confidence=_confidence_label(score),
        best_product_id=best.product_id,
        reasons=[
            f"best match {best.product_id} scored {best.score}/{max_total}",
            f"{price_reason}: competition factor {competition}",
            f"{tier} organization: history factor {history}",
        ],
    )


def estimate_win_score(announcement: Announcement, catalog: Catalog) -> int:
    """Return the 0-100 win-likelihood estimate for an announcement."""
    return get_win_score_breakdown(announcement, catalog).score
