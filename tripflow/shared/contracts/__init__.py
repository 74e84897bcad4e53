"""
Data contracts shared across the planning, recommendation and
reflection pipelines.
"""

from tripflow.shared.contracts.budget import BudgetCheck, CostItem, parse_cost
from tripflow.shared.contracts.geo import Coordinates, PointOfInterest
from tripflow.shared.contracts.itinerary import (
    ActivityPlan,
    ActivityType,
    DayPlan,
    all_activities,
    parse_clock,
)
from tripflow.shared.contracts.knowledge import Attraction, KnowledgeRecord
from tripflow.shared.contracts.validation import (
    IssueCategory,
    IssueSeverity,
    ReflectionResult,
    ValidationIssue,
)

__all__ = [
    "ActivityPlan",
    "ActivityType",
    "Attraction",
    "BudgetCheck",
    "Coordinates",
    "CostItem",
    "DayPlan",
    "IssueCategory",
    "IssueSeverity",
    "KnowledgeRecord",
    "PointOfInterest",
    "ReflectionResult",
    "ValidationIssue",
    "all_activities",
    "parse_clock",
    "parse_cost",
]
