"""
Itinerary quality checkers.

Each checker is a pure function over PlanState returning zero or more
ValidationIssue entries. PlanValidator runs them in the order of
CHECKERS.
"""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from tripflow.reflection.geo import (
    LONG_DISTANCE_KM,
    haversine_km,
    required_travel_minutes,
)
from tripflow.shared.contracts import (
    ActivityType,
    IssueCategory,
    IssueSeverity,
    ValidationIssue,
    all_activities,
)
from tripflow.shared.schemas import PlanState


MIN_ACTIVITIES_PER_DAY = 3
EARLIEST_START = 6 * 60
LATEST_START = 23 * 60
MIN_DURATION = 30
MAX_DURATION = 480
LOW_UTILIZATION = Decimal("0.5")
MAX_TYPE_SHARE = 0.6


def _issue(category, severity, message, suggestion=None, day_number=None, details=None):
    return ValidationIssue(
        category=category,
        severity=severity,
        message=message,
        suggestion=suggestion,
        day_number=day_number,
        details=details or [],
    )


def check_structure(state: PlanState) -> List[ValidationIssue]:
    """Itinerary present, one entry per requested day, enough activities per day."""
    if not state.itinerary:
        return [
            _issue(
                IssueCategory.STRUCTURE,
                IssueSeverity.CRITICAL,
                "Itinerary is empty",
                "Generate a complete itinerary",
            )
        ]

    issues = []
    if len(state.itinerary) != state.duration_days:
        issues.append(
            _issue(
                IssueCategory.STRUCTURE,
                IssueSeverity.CRITICAL,
                f"Expected {state.duration_days} days, got {len(state.itinerary)} days",
                f"Plan exactly {state.duration_days} days",
            )
        )

    for day in state.itinerary:
        count = len(day.activities)
        if count == 0:
            issues.append(
                _issue(
                    IssueCategory.STRUCTURE,
                    IssueSeverity.CRITICAL,
                    f"Day {day.day_number} has no activities",
                    "Add at least 3 activities to this day",
                    day_number=day.day_number,
                )
            )
        elif count < MIN_ACTIVITIES_PER_DAY:
            issues.append(
                _issue(
                    IssueCategory.STRUCTURE,
                    IssueSeverity.WARNING,
                    f"Day {day.day_number} has only {count} activities (recommended: 4+)",
                    "Add more activities to fill the day",
                    day_number=day.day_number,
                )
            )
    return issues


def check_budget(state: PlanState) -> List[ValidationIssue]:
    """Total cost against budget, plus a nudge when most of the budget is unused."""
    check = state.budget_check
    if check is None:
        return [
            _issue(
                IssueCategory.BUDGET,
                IssueSeverity.WARNING,
                "Budget not validated",
                "Run budget validation before finalizing",
            )
        ]

    issues = []
    if not check.within_budget:
        issues.append(
            _issue(
                IssueCategory.BUDGET,
                IssueSeverity.CRITICAL,
                f"Budget exceeded by ${check.total_cost - check.budget:.2f}",
                "Replace expensive activities with cheaper alternatives",
                details=list(check.recommendations),
            )
        )

    if check.budget > 0:
        utilization = (check.total_cost / check.budget).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        if utilization < LOW_UTILIZATION:
            issues.append(
                _issue(
                    IssueCategory.BUDGET,
                    IssueSeverity.SUGGESTION,
                    f"Budget utilization is low ({utilization * 100:.0f}%)",
                    "Consider upgrading some experiences",
                )
            )
    return issues


def check_timing(state: PlanState) -> List[ValidationIssue]:
    """Overlaps, start times outside 06:00-23:00, and very short or long activities."""
    issues = []
    for day in state.itinerary:
        previous_end = 0
        for activity in day.ordered_activities():
            start = activity.start_minutes
            if start is None:
                issues.append(
                    _issue(
                        IssueCategory.TIMING,
                        IssueSeverity.WARNING,
                        f"Activity '{activity.name}' has no valid start time",
                        "Schedule a start time",
                        day_number=day.day_number,
                    )
                )
                continue

            if start < previous_end:
                issues.append(
                    _issue(
                        IssueCategory.TIMING,
                        IssueSeverity.CRITICAL,
                        f"Activity '{activity.name}' at {activity.start_time} overlaps "
                        f"with the previous activity",
                        "Adjust start times so activities do not overlap",
                        day_number=day.day_number,
                    )
                )

            if start < EARLIEST_START or start > LATEST_START:
                issues.append(
                    _issue(
                        IssueCategory.TIMING,
                        IssueSeverity.WARNING,
                        f"Activity '{activity.name}' starts at an unusual time "
                        f"({activity.start_time})",
                        "Schedule between 06:00 and 23:00",
                        day_number=day.day_number,
                    )
                )

            duration = activity.duration_minutes
            if duration is not None:
                if duration < MIN_DURATION:
                    issues.append(
                        _issue(
                            IssueCategory.TIMING,
                            IssueSeverity.SUGGESTION,
                            f"Activity '{activity.name}' is very short ({duration} min)",
                            "Allow at least 30 minutes",
                            day_number=day.day_number,
                        )
                    )
                elif duration > MAX_DURATION:
                    issues.append(
                        _issue(
                            IssueCategory.TIMING,
                            IssueSeverity.WARNING,
                            f"Activity '{activity.name}' is very long ({duration} min)",
                            "Split it into shorter blocks",
                            day_number=day.day_number,
                        )
                    )
                previous_end = start + duration
    return issues


def check_geography(state: PlanState) -> List[ValidationIssue]:
    """Enough time between consecutive activities that are far apart."""
    if not state.geo_data:
        return [
            _issue(
                IssueCategory.GEOGRAPHY,
                IssueSeverity.WARNING,
                "Locations not geocoded",
                "Geocode activity locations to verify travel times",
            )
        ]

    issues = []
    for day in state.itinerary:
        activities = day.ordered_activities()
        for current, following in zip(activities, activities[1:]):
            here = state.geo_data.get(current.location or "")
            there = state.geo_data.get(following.location or "")
            if not (here and there and here.success and there.success):
                continue

            distance = haversine_km(here.latitude, here.longitude, there.latitude, there.longitude)
            required = required_travel_minutes(distance)

            gap = 0
            if (
                current.start_minutes is not None
                and current.duration_minutes is not None
                and following.start_minutes is not None
            ):
                gap = following.start_minutes - (current.start_minutes + current.duration_minutes)

            if distance > LONG_DISTANCE_KM and gap < required:
                issues.append(
                    _issue(
                        IssueCategory.GEOGRAPHY,
                        IssueSeverity.CRITICAL,
                        f"Not enough travel time from '{current.name}' to "
                        f"'{following.name}' ({distance:.1f} km, {gap} min gap, "
                        f"~{required} min needed)",
                        f"Leave at least {required} minutes between these activities "
                        f"or pick closer locations",
                        day_number=day.day_number,
                    )
                )
    return issues


def check_diversity(state: PlanState) -> List[ValidationIssue]:
    """No single activity type dominates; lodging and meals are planned."""
    activities = all_activities(state.itinerary)
    counts = Counter(activity.type for activity in activities)
    total = len(activities)

    issues = []
    if total:
        for activity_type, count in counts.items():
            share = count / total
            if share > MAX_TYPE_SHARE:
                issues.append(
                    _issue(
                        IssueCategory.DIVERSITY,
                        IssueSeverity.WARNING,
                        f"Activity type '{activity_type.value}' is overrepresented "
                        f"({share * 100:.0f}%)",
                        "Mix in other kinds of activities",
                    )
                )

    if ActivityType.ACCOMMODATION not in counts:
        issues.append(
            _issue(
                IssueCategory.DIVERSITY,
                IssueSeverity.SUGGESTION,
                "No accommodation planned",
                "Add hotel check-in or accommodation details",
            )
        )
    if ActivityType.DINING not in counts:
        issues.append(
            _issue(
                IssueCategory.DIVERSITY,
                IssueSeverity.SUGGESTION,
                "No dining planned",
                "Add meals to the itinerary",
            )
        )
    return issues


CHECKERS = (
    check_structure,
    check_budget,
    check_timing,
    check_geography,
    check_diversity,
)
