"""
Tests for the destination recommendation pipeline.
"""

import json

import pytest

from tripflow.recommendation import (
    DestinationCandidate,
    RecommendationGraphConfig,
    RecommendationServices,
    RecommendationState,
    recommend_destinations,
)
from tripflow.recommendation.graph.build import create_recommendation_graph
from tripflow.recommendation.graph.config import DEFAULT_CONFIG
from tripflow.recommendation.nodes import apply_ranking, filter_by_region, parse_candidates
from tripflow.recommendation.nodes.intent import choose_strategy, infer_destination_type
from tripflow.recommendation.nodes.rank import sort_by_score
from tripflow.recommendation.nodes.reasons import FALLBACK_REASON, parse_reasons
from tripflow.recommendation.schemas import DestinationType, SearchStrategy
from tripflow.shared.parsing import ParseError
from conftest import FakeChat, run


CANDIDATES = [
    {"name": "Lima", "country": "Peru", "budgetLevel": 2, "matchScore": 70},
    {"name": "Cusco", "country": "Peru", "budgetLevel": 1, "matchScore": 90},
    {"name": "Lisbon", "country": "Portugal", "budgetLevel": 2, "matchScore": 80},
    {"name": "Santiago", "country": "Chile", "budgetLevel": 3, "matchScore": 60},
    {"name": "Bogota", "country": "Colombia", "budgetLevel": 2, "matchScore": 75},
]


def _candidates(*names):
    return [DestinationCandidate(name=n, country="Peru") for n in names]


def _router(candidates=None, ranking="[2, 1, 3]", reasons=None):
    candidates = json.dumps(CANDIDATES) if candidates is None else candidates

    def respond(prompt):
        if prompt.startswith("Suggest"):
            return candidates
        if prompt.startswith("Rank these"):
            return ranking
        if prompt.startswith("Write one short"):
            return reasons if reasons is not None else json.dumps(
                [{"index": 1, "reason": "Inca history."}, {"index": 2, "reason": "Coastal food."}]
            )
        return ""

    return FakeChat(respond)


# ============================================================================
# Intent analysis
# ============================================================================


class TestIntent:
    """Destination preference classification and strategy choice."""

    @pytest.mark.parametrize(
        "preference,expected",
        [
            ("South America", DestinationType.REGION),
            ("somewhere in Europe", DestinationType.REGION),
            ("Japan", DestinationType.COUNTRY),
            ("a quiet beach", DestinationType.VAGUE),
            ("Kyoto", DestinationType.CITY),
            ("", DestinationType.UNKNOWN),
            (None, DestinationType.UNKNOWN),
        ],
    )
    def test_destination_type(self, preference, expected):
        assert infer_destination_type(preference) == expected

    def test_strategy(self):
        assert choose_strategy(DestinationType.CITY, []) == SearchStrategy.DESTINATION_FOCUSED
        assert choose_strategy(DestinationType.VAGUE, ["hiking"]) == SearchStrategy.INTEREST_FOCUSED
        assert choose_strategy(DestinationType.UNKNOWN, []) == SearchStrategy.GENERAL


# ============================================================================
# Candidate parsing
# ============================================================================


class TestParseCandidates:
    """Candidates are read from fenced or wrapped arrays, excluding names."""

    def test_fenced_array_with_exclusions(self):
        raw = "Here you go:\n```json\n" + json.dumps(CANDIDATES) + "\n```"
        candidates = parse_candidates(raw, exclude_names=[" lima "])
        assert [c.name for c in candidates] == ["Cusco", "Lisbon", "Santiago", "Bogota"]
        assert candidates[0].budget_level == 1
        assert candidates[0].match_score == 90.0

    def test_wrapped_object(self):
        raw = json.dumps({"candidates": CANDIDATES[:2]})
        assert len(parse_candidates(raw)) == 2

    def test_malformed_entries_skipped(self):
        raw = json.dumps([{"country": "Peru"}, "Lima", {"name": "Cusco", "budgetLevel": 9}])
        candidates = parse_candidates(raw)
        assert [c.name for c in candidates] == ["Cusco"]
        assert candidates[0].budget_level == 3

    def test_string_features(self):
        candidate = DestinationCandidate(name="Cusco", features="ruins, hiking ,")
        assert candidate.features == ["ruins", "hiking"]

    def test_not_an_array(self):
        with pytest.raises(ParseError):
            parse_candidates('{"name": "Lima"}')


# ============================================================================
# Filtering and ranking
# ============================================================================


class TestFilterByRegion:
    """Region preferences match by country; no match keeps everything."""

    def test_region_match(self):
        candidates = [DestinationCandidate(name=c["name"], country=c["country"]) for c in CANDIDATES]
        kept = filter_by_region(candidates, "South America")
        assert [c.name for c in kept] == ["Lima", "Cusco", "Santiago", "Bogota"]

    def test_place_match(self):
        kept = filter_by_region(_candidates("Lima", "Cusco"), "cusco")
        assert [c.name for c in kept] == ["Cusco"]

    def test_no_match_falls_back(self):
        candidates = _candidates("Lima", "Cusco")
        assert filter_by_region(candidates, "Antarctica") == candidates

    def test_no_preference(self):
        candidates = _candidates("Lima")
        assert filter_by_region(candidates, None) == candidates


class TestRanking:
    """1-based index reordering with invalid entries ignored."""

    def test_apply_ranking(self):
        candidates = _candidates("A", "B", "C", "D")
        ranked = apply_ranking(candidates, [3, "1", 3, 99, "x", 0])
        assert [c.name for c in ranked] == ["C", "A", "B", "D"]

    def test_sort_by_score(self):
        candidates = [
            DestinationCandidate(name="low", match_score=10),
            DestinationCandidate(name="high", match_score=95),
        ]
        assert [c.name for c in sort_by_score(candidates)] == ["high", "low"]


class TestParseReasons:
    def test_index_mapping(self):
        raw = json.dumps([{"index": 2, "reason": "Food"}, {"index": 7, "reason": "x"}, {"reason": "y"}])
        assert parse_reasons(raw, 2) == {1: "Food"}

    def test_wrapped(self):
        raw = json.dumps({"reasons": [{"index": 1, "reason": "Ruins"}]})
        assert parse_reasons(raw, 1) == {0: "Ruins"}


# ============================================================================
# Full pipeline
# ============================================================================


class TestRecommendationPipeline:
    """End-to-end runs with a scripted reasoning collaborator."""

    def test_full_run(self):
        state = RecommendationState(
            session_id="rec-1",
            destination_preference="South America",
            interests=["history", "food"],
            exclude_names=["Bogota"],
        )
        final = run(recommend_destinations(state, RecommendationServices(_router())))

        assert final.completed is True
        assert final.execution.progress == 100
        assert final.analyzed_intent.destination_type == DestinationType.REGION
        assert [c.name for c in final.candidates] == ["Lima", "Cusco", "Lisbon", "Santiago"]
        assert [c.name for c in final.filtered] == ["Lima", "Cusco", "Santiago"]
        # three candidates: below the ranking threshold, order kept
        assert [c.name for c in final.recommendations] == ["Lima", "Cusco", "Santiago"]
        assert final.recommendations[0].recommend_reason == "Inca history."
        assert final.recommendations[2].recommend_reason == FALLBACK_REASON.format(name="Santiago")

    def test_ranking_applied(self):
        state = RecommendationState(destination_preference="anywhere warm")
        final = run(recommend_destinations(state, RecommendationServices(_router())))

        assert len(final.ranked) == 5
        assert [c.name for c in final.recommendations] == ["Cusco", "Lima", "Lisbon"]

    def test_ranking_unavailable_sorts_by_score(self):
        state = RecommendationState()
        final = run(recommend_destinations(state, RecommendationServices(_router(ranking=""))))
        assert [c.name for c in final.recommendations] == ["Cusco", "Lisbon", "Bogota"]

    def test_unparseable_candidates(self):
        final = run(
            recommend_destinations(
                RecommendationState(), RecommendationServices(_router(candidates="no idea"))
            )
        )
        assert final.recommendations == []
        assert final.completed is True
        assert any(e.startswith("search_candidates:") for e in final.execution.errors)

    def test_reasons_fallback(self):
        final = run(
            recommend_destinations(
                RecommendationState(), RecommendationServices(_router(reasons="sorry"))
            )
        )
        assert all(
            c.recommend_reason == FALLBACK_REASON.format(name=c.name)
            for c in final.recommendations
        )


class TestRecommendationConfig:
    """Per-call configs never leak into shared services."""

    def test_override_leaves_services_untouched(self):
        services = RecommendationServices(_router())
        create_recommendation_graph(services, RecommendationGraphConfig(top_k=1))

        assert services.config.top_k == 3
        assert DEFAULT_CONFIG.top_k == 3

    def test_override_applies_to_run(self):
        services = RecommendationServices(_router())
        state = RecommendationState(destination_preference="anywhere warm")

        narrow = run(recommend_destinations(state, services, RecommendationGraphConfig(top_k=1)))
        default = run(recommend_destinations(state, services))

        assert len(narrow.recommendations) == 1
        assert len(default.recommendations) == 3
