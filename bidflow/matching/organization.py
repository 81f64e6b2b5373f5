"""Organization affinity scoring."""

from typing import Optional, Tuple

from bidflow.config.models import OrganizationTiers, Product
from bidflow.utils.text import normalize_for_matching

from .models import SignalScore

TIER_HIGH = "high"
TIER_PUBLIC = "public"
TIER_DEFAULT = "default"


class OrganizationScorer:
    """Maps an issuing organization to an affinity score.

    Tiers, checked in order by substring match on the lowercased name:
    1. the product's own target organizations or the catalog's high-affinity list
    2. generic public-sector fragments (city hall, county office, ...)
    3. anything else, including an empty name, gets the default score
    """

    def __init__(self, tiers: OrganizationTiers):
        self.tiers = tiers

    def classify(
        self, organization: str, product: Optional[Product] = None
    ) -> Tuple[str, Optional[str]]:
        """Return the tier name and the fragment that selected it."""
        name = normalize_for_matching(organization)
        if not name:
            return TIER_DEFAULT, None

        targets: Tuple[str, ...] = product.target_organizations if product else ()
        fragment = self._find(name, targets + self.tiers.high_affinity)
        if fragment:
            return TIER_HIGH, fragment

        fragment = self._find(name, self.tiers.public_sector)
        if fragment:
            return TIER_PUBLIC, fragment

        return TIER_DEFAULT, None

    def score(self, organization: str, product: Optional[Product] = None) -> SignalScore:
        tier, fragment = self.classify(organization, product)

        if tier == TIER_HIGH:
            return SignalScore(
                score=self.tiers.high_score,
                reasons=[f"high-affinity organization: {fragment}"],
            )
        if tier == TIER_PUBLIC:
            return SignalScore(
                score=self.tiers.public_score,
                reasons=[f"public-sector organization: {fragment}"],
            )
        if not organization or not organization.strip():
            reason = "organization unknown: default score"
        else:
            reason = "organization not recognized: default score"
        return SignalScore(score=self.tiers.default_score, reasons=[reason])

    @staticmethod
    def _find(name: str, fragments: Tuple[str, ...]) -> Optional[str]:
        for fragment in fragments:
            if fragment in name:
                return fragment
        return None
