"""Unit tests for the matching engine.

Tests the scorers and RuleBasedMatcher for:
- Strong/weak keyword scoring, the keyword cap and exclusion vetoes
- Diameter extraction and range scoring, including the tie-break rule
- Organization tiers
- Confidence tiers, the is_match rule, ranking and recommendation
- Determinism and structured logging
"""

import logging

import pytest

from bidflow.config.models import (
    Catalog,
    MatchThresholds,
    OrganizationTiers,
    PipeSizeRange,
    Product,
    ScoringWeights,
)
from bidflow.domain.models import Announcement, ConfidenceTier, Recommendation
from bidflow.matching import (
    KeywordScorer,
    MatchSet,
    OrganizationScorer,
    PipeSizeScorer,
    RuleBasedMatcher,
    classify_confidence,
    extract_pipe_sizes,
    match,
)
from bidflow.matching.keywords import EXCLUSION_REASON
from bidflow.matching.pipe_size import NO_PIPE_SIZE_REASON


class TestKeywordScorer:
    """Tests for KeywordScorer."""

    def test_strong_and_weak_keywords(self, simple_product):
        scorer = KeywordScorer(ScoringWeights())

        signal = scorer.score("new flowmeter for water intake", simple_product)

        # flowmeter (strong) + meter, water (weak)
        assert signal.score == 16
        assert signal.value == 1
        assert not signal.excluded
        assert "strong keyword matched: flowmeter" in signal.reasons
        assert "weak keyword matched: water" in signal.reasons

    def test_substring_matching_inside_longer_word(self, simple_product):
        scorer = KeywordScorer(ScoringWeights())

        signal = scorer.score("parameter study", simple_product)

        # "meter" hits inside "parameter"
        assert signal.score == 3
        assert signal.value == 0

    def test_exclusion_vetoes_product(self, simple_product):
        scorer = KeywordScorer(ScoringWeights())

        signal = scorer.score("heat flowmeter", simple_product)

        assert signal.excluded
        assert signal.score == 0
        assert signal.value == 0
        assert signal.reasons == [f"{EXCLUSION_REASON}: heat"]

    def test_keyword_cap(self, simple_product):
        scorer = KeywordScorer(ScoringWeights(keyword_cap=12))

        signal = scorer.score("flowmeter water", simple_product)

        assert signal.score == 12
        assert signal.reasons[-1] == "keyword score capped at 12"

    def test_empty_text(self, simple_product):
        signal = KeywordScorer(ScoringWeights()).score("", simple_product)

        assert signal.score == 0
        assert signal.reasons == []
        assert not signal.excluded

    def test_no_keywords(self, simple_product):
        signal = KeywordScorer(ScoringWeights()).score("road paving", simple_product)

        assert signal.score == 0
        assert signal.value == 0


class TestExtractPipeSizes:
    """Tests for extract_pipe_sizes()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("규격: DN 1000, DN 1200", [1000, 1200]),
            ("(DN-1000)", [1000]),
            ("dn300~1000", [300, 1000]),
            ("Φ300 강관", [300]),
            ("ø 150", [150]),
            ("관로 300mm 교체", [300]),
            ("관로 300 ㎜", [300]),
            ("구경 250", [250]),
            ("관경: 400", [400]),
            ("호칭경 80", [80]),
        ],
    )
    def test_notations(self, text, expected):
        assert extract_pipe_sizes(text) == expected

    def test_order_of_appearance_across_notations(self):
        assert extract_pipe_sizes("300mm pipe, DN 1000 and Φ150") == [300, 1000, 150]

    def test_duplicates_removed(self):
        assert extract_pipe_sizes("Φ300 (DN 300)") == [300]

    def test_out_of_range_values_dropped(self):
        assert extract_pipe_sizes("DN 20000") == []
        assert extract_pipe_sizes("DN 0") == []

    def test_no_diameter(self):
        assert extract_pipe_sizes("초음파유량계 구매") == []
        assert extract_pipe_sizes("") == []

    def test_dn_inside_word_ignored(self):
        assert extract_pipe_sizes("ADN 500") == []

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("관로 1,200mm 교체", [1200]),
            ("DN 1,200", [1200]),
            ("Φ1,500 강관", [1500]),
            ("DN 1,000~1,200", [1000, 1200]),
        ],
    )
    def test_thousands_separator(self, text, expected):
        assert extract_pipe_sizes(text) == expected

    def test_comma_separated_sizes_not_joined(self):
        assert extract_pipe_sizes("DN 80,100") == [80]

    def test_hyphenated_quantity_is_not_a_range_end(self):
        assert extract_pipe_sizes("DN 100-2대") == [100]
        assert extract_pipe_sizes("DN 100-300") == [100, 300]

    def test_thousands_separator_diameter_scored_against_range(self, default_catalog):
        announcement = Announcement(title="전자유량계 구매 관로 1,200mm")

        result = match(announcement, default_catalog).get("MF-1000C")

        assert result.pipe_size_mm == 1200
        assert result.breakdown.pipe_size_score == 0


class TestPipeSizeScorer:
    """Tests for PipeSizeScorer against a DN100-DN1000 product."""

    @pytest.fixture
    def scorer(self):
        return PipeSizeScorer(ScoringWeights())

    def test_within_range(self, scorer, simple_product):
        signal = scorer.score([500], simple_product)

        assert signal.score == 25
        assert signal.value == 500
        assert signal.reasons == ["DN500 within supported range DN100-DN1000"]

    @pytest.mark.parametrize("size", [80, 99, 1001, 1200])
    def test_near_range(self, scorer, simple_product, size):
        signal = scorer.score([size], simple_product)

        assert signal.score == 10
        assert "near supported range" in signal.reasons[0]

    @pytest.mark.parametrize("size", [50, 79, 1201, 5000])
    def test_outside_range(self, scorer, simple_product, size):
        signal = scorer.score([size], simple_product)

        assert signal.score == 0
        assert "outside supported range" in signal.reasons[0]

    def test_no_sizes(self, scorer, simple_product):
        signal = scorer.score([], simple_product)

        assert signal.score == 0
        assert signal.value is None
        assert signal.reasons == [NO_PIPE_SIZE_REASON]

    def test_best_scoring_diameter_wins(self, scorer, simple_product):
        signal = scorer.score([50, 500], simple_product)

        assert signal.score == 25
        assert signal.value == 500

    def test_earliest_diameter_wins_on_equal_scores(self, scorer, simple_product):
        signal = scorer.score([200, 500], simple_product)

        assert signal.value == 200


class TestOrganizationScorer:
    """Tests for OrganizationScorer with the default tiers."""

    @pytest.fixture
    def scorer(self):
        return OrganizationScorer(OrganizationTiers())

    def test_high_affinity(self, scorer):
        signal = scorer.score("한국수자원공사")

        assert signal.score == 50
        assert signal.reasons == ["high-affinity organization: 수자원공사"]

    def test_high_affinity_case_insensitive(self, scorer):
        assert scorer.score("K-Water 부산권지역본부").score == 50

    def test_public_sector(self, scorer):
        signal = scorer.score("서울특별시청")

        assert signal.score == 25
        assert signal.reasons == ["public-sector organization: 시청"]

    def test_unrecognized(self, scorer):
        signal = scorer.score("테스트회사")

        assert signal.score == 10
        assert signal.reasons == ["organization not recognized: default score"]

    @pytest.mark.parametrize("organization", ["", "   "])
    def test_empty_gets_default(self, scorer, organization):
        signal = scorer.score(organization)

        assert signal.score == 10
        assert signal.reasons == ["organization unknown: default score"]

    def test_product_target_organization(self, scorer, simple_product):
        assert scorer.score("ACME Utility District", simple_product).score == 50
        assert scorer.score("ACME Utility District").score == 10

    def test_classify(self, scorer):
        assert scorer.classify("한국농어촌공사") == ("high", "농어촌공사")
        assert scorer.classify("부산광역시 구청") == ("public", "구청")
        assert scorer.classify("") == ("default", None)


class TestClassifyConfidence:
    """Tests for classify_confidence()."""

    @pytest.mark.parametrize(
        "score,tier",
        [
            (0, ConfidenceTier.NONE),
            (19, ConfidenceTier.NONE),
            (20, ConfidenceTier.LOW),
            (39, ConfidenceTier.LOW),
            (40, ConfidenceTier.MEDIUM),
            (69, ConfidenceTier.MEDIUM),
            (70, ConfidenceTier.HIGH),
            (175, ConfidenceTier.HIGH),
        ],
    )
    def test_breakpoints(self, score, tier):
        assert classify_confidence(score, MatchThresholds()) == tier

    def test_monotonic(self):
        thresholds = MatchThresholds()
        ranks = [classify_confidence(score, thresholds).rank for score in range(0, 176)]

        assert ranks == sorted(ranks)


class TestRuleBasedMatcher:
    """Tests for RuleBasedMatcher on a single-product catalog."""

    def test_full_match(self, simple_catalog, make_announcement):
        announcement = make_announcement(
            title="Flowmeter replacement DN 500", organization="ACME Utility"
        )

        match_set = RuleBasedMatcher(simple_catalog).match(announcement)
        result = match_set.get("TEST-1")

        # flowmeter (10) + meter (3) + pipe (25) + organization (50)
        assert result.score == 88
        assert result.breakdown.keyword_score == 13
        assert result.breakdown.pipe_size_score == 25
        assert result.breakdown.organization_score == 50
        assert result.confidence == ConfidenceTier.HIGH
        assert result.is_match
        assert result.pipe_size_mm == 500
        assert match_set.best_match is result
        assert match_set.recommendation == Recommendation.PROCEED

    def test_reasons_in_scorer_order(self, simple_catalog, make_announcement):
        announcement = make_announcement(title="flowmeter DN 500", organization="ACME Utility")

        reasons = match(announcement, simple_catalog).all_matches[0].reasons

        assert reasons == [
            "strong keyword matched: flowmeter",
            "weak keyword matched: meter",
            "DN500 within supported range DN100-DN1000",
            "high-affinity organization: acme utility",
        ]

    def test_exclusion_zeroes_everything(self, simple_catalog, make_announcement):
        announcement = make_announcement(
            title="heat flowmeter DN 500", organization="ACME Utility"
        )

        result = match(announcement, simple_catalog).all_matches[0]

        assert result.excluded
        assert result.score == 0
        assert result.breakdown.total == 0
        assert not result.is_match
        assert result.confidence == ConfidenceTier.NONE
        assert result.pipe_size_mm is None
        assert result.reasons == [f"{EXCLUSION_REASON}: heat"]

    def test_high_score_without_strong_keyword_is_not_a_match(
        self, simple_catalog, make_announcement
    ):
        announcement = make_announcement(title="water meter DN 500", organization="ACME Utility")

        match_set = match(announcement, simple_catalog)
        result = match_set.all_matches[0]

        assert result.score == 81
        assert result.confidence == ConfidenceTier.HIGH
        assert not result.is_match
        assert match_set.best_match is None
        assert match_set.recommendation == Recommendation.SKIP

    def test_below_qualifying_score_is_not_a_match(self, simple_catalog, make_announcement):
        announcement = make_announcement(title="flowmeter")

        result = match(announcement, simple_catalog).all_matches[0]

        # flowmeter (10) + meter (3) + default organization (10)
        assert result.score == 23
        assert result.confidence == ConfidenceTier.LOW
        assert not result.is_match

    def test_empty_catalog(self, make_announcement):
        match_set = match(make_announcement(title="flowmeter"), Catalog(version="empty"))

        assert match_set.all_matches == []
        assert match_set.best_match is None
        assert match_set.recommendation == Recommendation.SKIP
        assert match_set.catalog_version == "empty"

    def test_ties_keep_catalog_order(self, make_announcement):
        products = [
            Product(
                id=f"P{i}",
                name=f"Product {i}",
                category="test",
                pipe_size=PipeSizeRange(min_mm=10, max_mm=100),
                strong_keywords=["flowmeter"],
            )
            for i in range(4)
        ]
        catalog = Catalog(products=products)

        match_set = match(make_announcement(title="flowmeter"), catalog)

        assert [r.product_id for r in match_set.all_matches] == ["P0", "P1", "P2", "P3"]

    def test_ranked_by_score(self, make_announcement):
        catalog = Catalog(
            products=[
                Product(
                    id="LOW",
                    name="Low",
                    category="test",
                    pipe_size=PipeSizeRange(min_mm=10, max_mm=100),
                    strong_keywords=["pump"],
                ),
                Product(
                    id="HIGH",
                    name="High",
                    category="test",
                    pipe_size=PipeSizeRange(min_mm=10, max_mm=100),
                    strong_keywords=["flowmeter", "sensor"],
                ),
            ]
        )

        match_set = match(
            make_announcement(title="flowmeter sensor DN 50", organization="한국수자원공사"),
            catalog,
        )

        assert [r.product_id for r in match_set.all_matches] == ["HIGH", "LOW"]
        assert match_set.best_match.product_id == "HIGH"

    def test_custom_thresholds(self, simple_product, make_announcement):
        catalog = Catalog(
            products=[simple_product],
            thresholds=MatchThresholds(high=90, medium=50, low=10, qualifying=20),
        )

        result = match(make_announcement(title="flowmeter"), catalog).all_matches[0]

        assert result.score == 23
        assert result.confidence == ConfidenceTier.LOW
        assert result.is_match

    def test_deterministic(self, simple_catalog, make_announcement):
        announcement = make_announcement(title="flowmeter DN 90", organization="시청")

        assert match(announcement, simple_catalog) == match(announcement, simple_catalog)

    def test_match_set_get_unknown_product(self, simple_catalog, make_announcement):
        match_set = match(make_announcement(title="flowmeter"), simple_catalog)

        assert match_set.get("NOPE") is None

    def test_logs_matched_event(self, simple_catalog, make_announcement, caplog):
        caplog.set_level(logging.INFO)
        announcement = make_announcement(
            title="flowmeter DN 500", organization="ACME Utility", id="A-1"
        )

        match(announcement, simple_catalog)

        events = [r for r in caplog.records if getattr(r, "event", None) == "matching.announcement.matched"]
        assert len(events) == 1
        assert events[0].best_match == "TEST-1"
        assert events[0].component == "matching"

    def test_logs_skipped_event_at_debug(self, simple_catalog, make_announcement, caplog):
        caplog.set_level(logging.DEBUG)

        match(make_announcement(title="road paving"), simple_catalog)

        events = [r for r in caplog.records if getattr(r, "event", None) == "matching.announcement.skipped"]
        assert len(events) == 1
        assert events[0].levelno == logging.DEBUG


class TestDefaultCatalogProperties:
    """Properties that hold for every product of the packaged catalog."""

    def test_own_strong_keyword_never_lowers_score(self, default_catalog):
        base = Announcement(title="유량계 구매 (DN 200)", organization="서울시")
        base_set = match(base, default_catalog)

        for product in default_catalog.products:
            boosted = Announcement(
                title=f"{base.title} {product.strong_keywords[0]}", organization="서울시"
            )
            before = base_set.get(product.id)
            after = match(boosted, default_catalog).get(product.id)

            assert after.score >= before.score, product.id
            assert after.breakdown.keyword_score > before.breakdown.keyword_score, product.id

    def test_exclusion_keyword_always_zeroes(self, default_catalog):
        for product in default_catalog.products:
            for keyword in product.exclude_keywords:
                announcement = Announcement(
                    title=f"{product.strong_keywords[0]} {keyword} DN 300",
                    organization="한국수자원공사",
                )
                result = match(announcement, default_catalog).get(product.id)

                assert result.score == 0, (product.id, keyword)
                assert not result.is_match
                assert result.excluded

    def test_no_diameter_means_zero_pipe_score(self, default_catalog):
        announcement = Announcement(title="유량계 구매", organization="시청")

        for result in match(announcement, default_catalog).all_matches:
            assert result.breakdown.pipe_size_score == 0
            if not result.excluded:
                assert NO_PIPE_SIZE_REASON in result.reasons

    def test_empty_organization_gets_default_score(self, default_catalog):
        announcement = Announcement(title="유량계 구매", organization="")

        for result in match(announcement, default_catalog).all_matches:
            assert result.breakdown.organization_score == 10

    def test_match_set_is_consistent(self, default_catalog):
        announcement = Announcement(
            title="다회선 초음파유량계 설치 공사",
            organization="한국수자원공사",
            description="규격: DN 1000, DN 1200",
        )

        match_set = match(announcement, default_catalog)

        scores = [r.score for r in match_set.all_matches]
        assert scores == sorted(scores, reverse=True)
        assert len(match_set.all_matches) == len(default_catalog.products)
        assert isinstance(match_set, MatchSet)
        assert match_set.best_match is match_set.matched[0]
        for result in match_set.all_matches:
            if result.excluded:
                assert result.score == 0
            else:
                assert result.score == result.breakdown.total
            assert 0 <= result.score <= default_catalog.max_total_score
