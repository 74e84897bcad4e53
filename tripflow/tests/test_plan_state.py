"""
Tests for the plan state record and request validation.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tripflow.recommendation.schemas import RecommendationState
from tripflow.shared.contracts import Attraction, DayPlan
from tripflow.shared.schemas import ExecutionStatus, PlanRequest, PlanState


class TestDefaults:
    """Absent fields resolve to documented defaults."""

    def test_empty_state(self):
        state = PlanState()
        assert state.get("attractions") == []
        assert state.get("geo_data") == {}
        assert state.get("itinerary") == []
        assert state.get("budget") == Decimal("0")
        assert state.get("reflection_count") == 0
        assert state.get("approved") is False
        assert state.get("budget_check") is None
        assert state.execution.progress == 0
        assert state.execution.current_step == "initialized"

    def test_unknown_field_is_programming_error(self):
        with pytest.raises(KeyError):
            PlanState().get("hotel_rating")

    def test_defaults_are_not_shared(self):
        a, b = PlanState(), PlanState()
        assert a.attractions is not b.attractions


class TestMerge:
    """Copy-on-write partial updates."""

    def test_merge_returns_new_version(self):
        original = PlanState(destination="Lisbon", duration_days=3)
        updated = original.merge({"attractions": [Attraction(name="Belem Tower")]})

        assert updated is not original
        assert original.attractions == []
        assert [a.name for a in updated.attractions] == ["Belem Tower"]
        assert updated.destination == "Lisbon"

    def test_merge_copies_nested_values(self):
        original = PlanState(itinerary=[DayPlan(day_number=1)])
        updated = original.merge({"approved": True})
        assert updated.itinerary == original.itinerary
        assert updated.itinerary[0] is not original.itinerary[0]

    def test_merge_coerces_types(self):
        updated = PlanState().merge({"budget": "250.50", "itinerary": [{"day_number": 1}]})
        assert updated.budget == Decimal("250.50")
        assert isinstance(updated.itinerary[0], DayPlan)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            PlanState().merge({"hotel_rating": 5})

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            PlanState().merge({"reflection_count": "many"})

    def test_state_is_frozen(self):
        with pytest.raises(ValidationError):
            PlanState().approved = True

    def test_execution_status_helpers(self):
        status = ExecutionStatus().advance("rag_retrieval", 30, "Searching")
        failed = status.with_error("search: timeout")
        assert (status.current_step, status.progress) == ("rag_retrieval", 30)
        assert status.errors == []
        assert failed.errors == ["search: timeout"]

    def test_recommendation_state_shares_execution_record(self):
        state = RecommendationState().merge({"completed": True})
        assert isinstance(state.execution, ExecutionStatus)
        assert state.get("days") == 5
        assert state.get("budget_level") == 2


class TestPlanRequest:
    """Caller contract checked before any pipeline runs."""

    def test_valid_request_builds_state(self):
        request = PlanRequest(
            destination=" Kyoto ",
            destination_country="Japan",
            duration_days=4,
            budget="1500",
            start_date=date(2025, 4, 1),
        )
        state = PlanState.from_request(request)
        assert state.destination == "Kyoto"
        assert state.location_context == "Kyoto, Japan"
        assert state.budget == Decimal("1500")
        assert state.party_size == 1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"destination": ""},
            {"destination": "   "},
            {"duration_days": 0},
            {"budget": 0},
            {"party_size": 0},
        ],
    )
    def test_invalid_requests_rejected(self, overrides):
        params = {"destination": "Kyoto", "duration_days": 3, "budget": 1000}
        params.update(overrides)
        with pytest.raises(ValidationError):
            PlanRequest(**params)

    def test_missing_required_parameters(self):
        with pytest.raises(ValidationError):
            PlanRequest(destination="Kyoto")
