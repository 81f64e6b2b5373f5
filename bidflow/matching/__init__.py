"""Bid-to-product matching engine.

This module provides:
- RuleBasedMatcher / match(): score an announcement against every catalog product
- MatchResult / MatchSet: per-product and per-announcement results
- Keyword, pipe-size and organization scorers
- Helpers for batch matching, statistics, summaries and JSON payloads
- Win-likelihood estimate and a hybrid blend over external similarity scores
"""

from .engine import RuleBasedMatcher, classify_confidence, match
from .hybrid import (
    HybridMatcher,
    HybridMatchResult,
    HybridRecommendation,
    SimilarityHit,
    SimilaritySource,
    overall_recommendation,
)
from .keywords import KeywordScorer
from .models import MatchResult, MatchSet, ScoreBreakdown, SignalScore
from .organization import OrganizationScorer
from .pipe_size import PipeSizeScorer, extract_pipe_sizes
from .utils import (
    MatchingStats,
    batch_match,
    build_match_payload,
    build_rationale_dict,
    calculate_matching_stats,
    confidence_ratio,
    generate_match_summary,
    normalize_score,
)
from .win_score import WinScoreBreakdown, estimate_win_score, get_win_score_breakdown

__all__ = [
    "match",
    "RuleBasedMatcher",
    "classify_confidence",
    "MatchResult",
    "MatchSet",
    "ScoreBreakdown",
    "SignalScore",
    "KeywordScorer",
    "PipeSizeScorer",
    "OrganizationScorer",
    "extract_pipe_sizes",
    "MatchingStats",
    "batch_match",
    "build_match_payload",
    "build_rationale_dict",
    "calculate_matching_stats",
    "confidence_ratio",
    "generate_match_summary",
    "normalize_score",
    "WinScoreBreakdown",
    "estimate_win_score",
    "get_win_score_breakdown",
    "HybridMatcher",
    "HybridMatchResult",
    "HybridRecommendation",
    "SimilarityHit",
    "SimilaritySource",
    "overall_recommendation",
]
