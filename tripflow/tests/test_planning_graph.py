"""
Tests for the planning pipeline: routing, normalization and full runs.
"""

import json
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tripflow.planning import PlanningGraphConfig, PlanningServices, create_planning_graph, plan_trip
from tripflow.planning.generation import parse_itinerary
from tripflow.planning.graph.config import get_config
from tripflow.planning.nodes import (
    generate_itinerary_node,
    normalize_itinerary,
    route_after_reflection,
)
from tripflow.shared.contracts import ActivityPlan, DayPlan
from tripflow.shared.parsing import ParseError
from tripflow.shared.schemas import PlanState
from tripflow.tools import validate_budget
from conftest import (
    FakeChat,
    FakeGeocoder,
    FakeKnowledgeBase,
    FakeRepository,
    make_itinerary_json,
    make_records,
    run,
)


# ============================================================================
# Builders
# ============================================================================


def _router(itinerary, review="PASS"):
    """Chat that answers generation prompts with `itinerary` and reviews with `review`."""

    def respond(prompt):
        if prompt.startswith("Create a detailed"):
            return itinerary(prompt) if callable(itinerary) else itinerary
        if "respond with PASS" in prompt:
            return review
        return ""

    return FakeChat(respond)


def _services(chat, capability_config, repository=None, knowledge_base=None, geocoder=None):
    return PlanningServices.create(
        chat,
        knowledge_base or FakeKnowledgeBase(make_records()),
        geocoder or FakeGeocoder(),
        repository=repository,
        capability_config=capability_config,
    )


def _request(**overrides):
    params = {
        "destination": "Paris",
        "destination_country": "France",
        "duration_days": 2,
        "budget": 250,
        "session_id": "plan-test",
    }
    params.update(overrides)
    return params


def _nodes_run(state):
    return [h["node"] for h in state.metadata["execution_history"]]


# ============================================================================
# Routing
# ============================================================================


class TestRouteAfterReflection:
    """Regenerate only while unapproved and under the reflection cap."""

    @pytest.mark.parametrize(
        "approved,count,expected",
        [
            (True, 1, "finalize"),
            (True, 0, "finalize"),
            (False, 1, "regenerate"),
            (False, 2, "regenerate"),
            (False, 3, "finalize"),
            (False, 7, "finalize"),
        ],
    )
    def test_routing(self, approved, count, expected):
        state = PlanState(approved=approved, reflection_count=count)
        assert route_after_reflection(state) == expected

    def test_custom_cap(self):
        state = PlanState(approved=False, reflection_count=1)
        assert route_after_reflection(state, max_reflections=1) == "finalize"


# ============================================================================
# Itinerary parsing and normalization
# ============================================================================


class TestParseItinerary:
    """Generated JSON is accepted in camelCase or snake_case."""

    def test_camel_case(self):
        days = parse_itinerary(make_itinerary_json(days=2))
        assert [d.day_number for d in days] == [1, 2]
        first = days[0].activities[0]
        assert first.start_time == "09:00"
        assert first.duration_minutes == 120
        assert first.estimated_cost == Decimal("20.0")

    def test_fenced_bare_list(self):
        raw = '```json\n[{"day_number": 1, "activities": [{"name": "Louvre", "type": "museum"}]}]\n```'
        days = parse_itinerary(raw)
        assert days[0].activities[0].type.value == "other"

    def test_missing_days(self):
        with pytest.raises(ParseError):
            parse_itinerary('{"plan": []}')

    def test_garbage(self):
        with pytest.raises(ParseError):
            parse_itinerary("I could not plan this trip")

    def test_malformed_activity_dropped_rest_kept(self):
        payload = json.loads(make_itinerary_json(days=3))
        payload["days"][2]["activities"][1]["durationMinutes"] = "about 2 hours"
        payload["days"][0]["activities"][0]["startTime"] = 9

        days = parse_itinerary(json.dumps(payload))

        assert [len(d.activities) for d in days] == [4, 4, 3]
        assert days[0].activities[0].start_time == "09:00"
        assert "Day 3 stop 2" not in [a.name for a in days[2].activities]

    def test_integer_start_hour(self):
        assert ActivityPlan(name="Museum", start_time=14).start_minutes == 14 * 60


class TestNormalizeItinerary:
    """Days renumbered in order, activities sorted, dates assigned."""

    def test_normalize(self):
        late = ActivityPlan(name="Dinner", type="dining", start_time="19:00")
        early = ActivityPlan(name="Breakfast", type="dining", start_time="08:00")
        state = PlanState(
            start_date=date(2026, 11, 1),
            itinerary=[
                DayPlan(day_number=5, activities=[]),
                DayPlan(day_number=2, activities=[late, early]),
            ],
        )

        days = normalize_itinerary(state)

        assert [d.day_number for d in days] == [1, 2]
        assert [a.name for a in days[0].activities] == ["Breakfast", "Dinner"]
        assert days[0].date == date(2026, 11, 1)
        assert days[1].date == date(2026, 11, 2)

    def test_without_start_date(self):
        state = PlanState(itinerary=[DayPlan(day_number=1)])
        assert normalize_itinerary(state)[0].date is None


# ============================================================================
# Full pipeline
# ============================================================================


class TestPlanningPipeline:
    """End-to-end runs over in-memory collaborators."""

    def test_happy_path(self, capability_config):
        repository = FakeRepository()
        chat = _router(make_itinerary_json(days=2))
        services = _services(chat, capability_config, repository=repository)

        final = run(plan_trip(_request(start_date="2026-11-01"), services))

        assert final.approved is True
        assert final.reflection_count == 1
        assert final.execution.progress == 100
        assert final.execution.current_step == "completed"
        assert final.execution.errors == []
        assert len(final.itinerary) == 2
        assert final.itinerary[1].date == date(2026, 11, 2)
        assert len(final.attractions) == 6
        assert final.geo_data["Paris"].success is True
        assert "Place 1-1" in final.geo_data
        assert final.budget_check.total_cost == Decimal("160")
        assert final.plan_steps
        assert final.metadata["quality"]["approved"] is True
        assert _nodes_run(final) == [
            "plan",
            "retrieve_knowledge",
            "validate_budget",
            "generate_itinerary",
            "reflect",
            "finalize",
        ]
        assert repository.saved[0].approved is True

    def test_reflection_cap(self, capability_config):
        chat = _router(make_itinerary_json(days=1))
        final = run(plan_trip(_request(), _services(chat, capability_config)))

        assert final.approved is False
        assert final.reflection_count == 3
        assert final.execution.progress == 100
        assert final.metadata["quality"]["reflection_cap_reached"] is True
        assert _nodes_run(final).count("generate_itinerary") == 3
        assert any("Expected 2 days, got 1 days" in i.message for i in final.issues)

    def test_revision_feedback_fixes_budget(self, capability_config):
        def itinerary(prompt):
            if "Budget exceeded" in prompt:
                return make_itinerary_json(days=2, cost=20)
            return make_itinerary_json(days=2, cost=100)

        chat = _router(itinerary)
        final = run(plan_trip(_request(), _services(chat, capability_config)))

        assert final.approved is True
        assert final.reflection_count == 2
        assert final.budget_check.within_budget is True
        generation_prompts = [p for p in chat.prompts if p.startswith("Create a detailed")]
        assert len(generation_prompts) == 2
        assert "previous draft was rejected" in generation_prompts[1]

    def test_custom_reflection_cap(self, capability_config):
        chat = _router(make_itinerary_json(days=1))
        config = PlanningGraphConfig(max_reflections=1)
        final = run(plan_trip(_request(), _services(chat, capability_config), config))
        assert final.reflection_count == 1
        assert final.approved is False

    def test_holistic_review_warning_does_not_block(self, capability_config):
        chat = _router(make_itinerary_json(days=2), review="Day 2 feels rushed.")
        final = run(plan_trip(_request(), _services(chat, capability_config)))

        assert final.approved is True
        quality = [i for i in final.issues if i.category.value == "quality"]
        assert quality[0].suggestion == "Day 2 feels rushed."

    def test_generation_failure_keeps_running(self, capability_config):
        chat = _router("")
        final = run(plan_trip(_request(), _services(chat, capability_config)))

        assert final.itinerary == []
        assert final.approved is False
        assert final.execution.progress == 100
        assert any(e.startswith("generate_itinerary:") for e in final.execution.errors)
        assert any(i.message == "Itinerary is empty" for i in final.issues)

    def test_knowledge_outage_degrades(self, capability_config):
        kb = FakeKnowledgeBase(make_records(), failures=100)
        chat = _router(make_itinerary_json(days=2))
        final = run(plan_trip(_request(), _services(chat, capability_config, knowledge_base=kb)))

        assert final.attractions == []
        assert any(e.startswith("retrieve_knowledge:") for e in final.execution.errors)
        assert final.approved is True
        assert final.execution.progress == 100

    def test_persist_failure_recorded(self, capability_config):
        chat = _router(make_itinerary_json(days=2))
        repository = FakeRepository(error=IOError("disk full"))
        final = run(plan_trip(_request(), _services(chat, capability_config, repository=repository)))

        assert final.execution.progress == 100
        assert any("persist failed" in e for e in final.execution.errors)

    def test_invalid_request(self, capability_config):
        services = _services(_router(make_itinerary_json()), capability_config)
        with pytest.raises(ValidationError):
            run(plan_trip(_request(duration_days=0), services))
        with pytest.raises(ValidationError):
            run(plan_trip({"destination": "Paris"}, services))


# ============================================================================
# Graph construction and configuration
# ============================================================================


class TestPlanningGraphConfig:
    """Per-call configs apply to one graph without touching shared services."""

    def test_override_leaves_services_untouched(self, capability_config):
        services = _services(_router(make_itinerary_json()), capability_config)
        original_config, original_generator = services.config, services.generator

        create_planning_graph(
            services,
            PlanningGraphConfig(max_reflections=1, attractions_per_day=1, max_attractions_in_prompt=2),
        )

        assert services.config is original_config
        assert services.config.max_reflections == 3
        assert services.generator is original_generator
        assert services.generator.max_attractions_in_prompt == 20

    def test_override_applies_to_graph(self, capability_config):
        chat = _router(make_itinerary_json(days=1))
        services = _services(chat, capability_config)
        config = PlanningGraphConfig(max_reflections=1, max_attractions_in_prompt=2)

        final = run(plan_trip(_request(), services, config))

        assert final.reflection_count == 1
        prompt = next(p for p in chat.prompts if p.startswith("Create a detailed"))
        assert prompt.count("\n- Attraction ") == 2

        later = run(plan_trip(_request(), services))
        assert later.reflection_count == 3

    def test_get_config_keeps_explicit_zero(self):
        assert get_config(max_reflections=0).max_reflections == 0
        assert get_config().max_reflections == 3


class TestGenerateNode:
    """The generate node prices the plan it just produced."""

    def test_no_activities_clears_stale_budget_check(self, capability_config):
        chat = _router('{"days": [{"dayNumber": 1, "activities": []}]}')
        services = _services(chat, capability_config)
        state = PlanState(
            session_id="gen",
            destination="Paris",
            duration_days=1,
            budget=Decimal("100"),
            budget_check=validate_budget([{"name": "Louvre", "price": "$20"}], Decimal("100")),
        )

        update = run(generate_itinerary_node(state, services))

        assert update["itinerary"][0].activities == []
        assert update["budget_check"] is None

    def test_activities_are_priced(self, capability_config):
        chat = _router(make_itinerary_json(days=1, cost=15))
        services = _services(chat, capability_config)
        state = PlanState(session_id="gen", destination="Paris", duration_days=1, budget=Decimal("100"))

        update = run(generate_itinerary_node(state, services))

        assert update["budget_check"].total_cost == Decimal("60")
