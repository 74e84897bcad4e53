"""Itinerary validation: rule-based checkers plus a holistic LLM review."""

from tripflow.reflection.checkers import (
    CHECKERS,
    check_budget,
    check_diversity,
    check_geography,
    check_structure,
    check_timing,
)
from tripflow.reflection.geo import haversine_km, required_travel_minutes
from tripflow.reflection.validator import PlanValidator

__all__ = [
    "CHECKERS",
    "PlanValidator",
    "check_budget",
    "check_diversity",
    "check_geography",
    "check_structure",
    "check_timing",
    "haversine_km",
    "required_travel_minutes",
]
