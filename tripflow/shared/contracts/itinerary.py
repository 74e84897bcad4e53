"""
Itinerary contracts.

Defines the day-by-day plan produced by itinerary generation and checked
by the reflection validator.
"""

import re
from datetime import date as Date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tripflow.shared.contracts.budget import parse_cost


class ActivityType(str, Enum):
    """Enumerated activity categories."""

    ACCOMMODATION = "accommodation"
    DINING = "dining"
    ACTIVITY = "activity"
    TRANSPORTATION = "transportation"
    OTHER = "other"


_TYPE_SYNONYMS = {
    "hotel": ActivityType.ACCOMMODATION,
    "lodging": ActivityType.ACCOMMODATION,
    "check-in": ActivityType.ACCOMMODATION,
    "restaurant": ActivityType.DINING,
    "food": ActivityType.DINING,
    "meal": ActivityType.DINING,
    "breakfast": ActivityType.DINING,
    "lunch": ActivityType.DINING,
    "dinner": ActivityType.DINING,
    "sightseeing": ActivityType.ACTIVITY,
    "attraction": ActivityType.ACTIVITY,
    "tour": ActivityType.ACTIVITY,
    "transport": ActivityType.TRANSPORTATION,
    "transit": ActivityType.TRANSPORTATION,
    "travel": ActivityType.TRANSPORTATION,
}

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def normalize_activity_type(value) -> ActivityType:
    """Map free-text activity types onto the enumerated categories."""
    if isinstance(value, ActivityType):
        return value
    text = str(value or "").strip().lower()
    try:
        return ActivityType(text)
    except ValueError:
        return _TYPE_SYNONYMS.get(text, ActivityType.OTHER)


def parse_clock(value: Optional[str]) -> Optional[int]:
    """
    Parse "HH:MM" (or "HH:MM:SS") into minutes after midnight.

    Returns:
        Minutes after midnight, or None when missing or malformed
    """
    if not value:
        return None
    match = _CLOCK_PATTERN.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


class ActivityPlan(BaseModel):
    """A single scheduled activity within a day."""

    name: str = Field(description="Activity name")
    type: ActivityType = Field(default=ActivityType.OTHER, description="Activity category")
    location: Optional[str] = Field(default=None, description="Venue or address")
    start_time: Optional[str] = Field(default=None, description="Start time, HH:MM")
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    estimated_cost: Decimal = Field(default=Decimal("0"))
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        return normalize_activity_type(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _coerce_start_hour(cls, value):
        # A bare hour (9) means "09:00"
        if isinstance(value, int) and not isinstance(value, bool):
            return f"{value:02d}:00"
        return value

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _coerce_cost(cls, value):
        return parse_cost(value)

    @property
    def start_minutes(self) -> Optional[int]:
        return parse_clock(self.start_time)

    @property
    def end_minutes(self) -> Optional[int]:
        start = self.start_minutes
        if start is None or self.duration_minutes is None:
            return None
        return start + self.duration_minutes


class DayPlan(BaseModel):
    """A single day in the itinerary."""

    day_number: int = Field(ge=1, description="Day number (1-indexed)")
    theme: str = ""
    date: Optional[Date] = None
    activities: List[ActivityPlan] = Field(default_factory=list)

    def ordered_activities(self) -> List[ActivityPlan]:
        """
        Activities ordered by start time.

        Activities without a parseable start time keep their relative
        position at the end.
        """
        timed = [a for a in self.activities if a.start_minutes is not None]
        untimed = [a for a in self.activities if a.start_minutes is None]
        return sorted(timed, key=lambda a: a.start_minutes) + untimed


def all_activities(itinerary: List[DayPlan]) -> List[ActivityPlan]:
    return [activity for day in itinerary for activity in day.activities]
