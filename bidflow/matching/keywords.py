"""Keyword scoring against a product's keyword dictionary."""

from bidflow.config.models import Product, ScoringWeights

from .models import SignalScore

EXCLUSION_REASON = "exclusion keyword found"


class KeywordScorer:
    """Scores normalized announcement text against one product's keywords.

    Matching is plain substring containment on lowercased text. A short
    keyword will also hit inside longer unrelated words; that loss of
    precision is accepted in exchange for working on Korean compounds
    without a tokenizer.
    """

    def __init__(self, weights: ScoringWeights):
        self.weights = weights

    def score(self, text: str, product: Product) -> SignalScore:
        """Score text for one product.

        Exclusion keywords are checked first; the first one found vetoes the
        product. Otherwise every strong keyword present adds the strong
        weight and every weak keyword adds the weak weight, capped at
        keyword_cap.

        Args:
            text: Announcement text already passed through normalize_for_matching
            product: Product whose keyword lists apply

        Returns:
            SignalScore with excluded=True and score 0 on a veto; value holds
            the number of strong keywords found
        """
        if not text:
            return SignalScore(score=0, reasons=[], value=0)

        for keyword in product.exclude_keywords:
            if keyword in text:
                return SignalScore(
                    score=0,
                    reasons=[f"{EXCLUSION_REASON}: {keyword}"],
                    excluded=True,
                    value=0,
                )

        total = 0
        strong_hits = 0
        reasons = []

        for keyword in product.strong_keywords:
            if keyword in text:
                strong_hits += 1
                total += self.weights.strong_keyword
                reasons.append(f"strong keyword matched: {keyword}")

        for keyword in product.weak_keywords:
            if keyword in text:
                total += self.weights.weak_keyword
                reasons.append(f"weak keyword matched: {keyword}")

        if total > self.weights.keyword_cap:
            reasons.append(f"keyword score capped at {self.weights.keyword_cap}")
            total = self.weights.keyword_cap

        return SignalScore(score=total, reasons=reasons, value=strong_hits)
