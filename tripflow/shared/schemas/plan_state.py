"""
Plan state threaded through the planning pipeline and the ReAct loop.

PlanState is immutable. Nodes return partial update dicts and the graph
engine (or the ReAct loop) merges them into a fresh instance, so no two
steps ever share a mutable state object.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tripflow.shared.contracts import (
    Attraction,
    BudgetCheck,
    Coordinates,
    DayPlan,
    PointOfInterest,
    ValidationIssue,
)
from tripflow.shared.schemas.base import ExecutionStatus, get_field, merge_state


class PlanRequest(BaseModel):
    """
    Caller-supplied parameters for a planning session.

    Validation happens here, before any pipeline starts; an invalid
    request raises pydantic.ValidationError.
    """

    destination: str = Field(min_length=1, description="Destination city or region")
    destination_country: str = Field(default="", description="Country of the destination")
    duration_days: int = Field(ge=1, le=30, description="Trip length in days")
    budget: Decimal = Field(gt=0, description="Total trip budget")
    party_size: int = Field(default=1, ge=1, description="Number of travellers")
    preferences: Optional[str] = Field(default=None, description="Free-text preferences")
    start_date: Optional[date] = None
    session_id: Optional[str] = None

    @field_validator("destination")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("destination must not be blank")
        return value.strip()


class PlanState(BaseModel):
    """
    Every input and artifact of a planning session.

    Absent fields resolve to the defaults declared here (empty
    collections, zero, False or None) so readers never dereference a
    missing value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Trip parameters
    session_id: Optional[str] = None
    destination: str = ""
    destination_country: str = ""
    duration_days: int = 0
    budget: Decimal = Decimal("0")
    party_size: int = 1
    preferences: Optional[str] = None
    start_date: Optional[date] = None

    # Pipeline artifacts
    plan_steps: List[str] = Field(default_factory=list)
    attractions: List[Attraction] = Field(default_factory=list)
    geo_data: Dict[str, Coordinates] = Field(default_factory=dict)
    budget_check: Optional[BudgetCheck] = None
    itinerary: List[DayPlan] = Field(default_factory=list)
    nearby_places: List[PointOfInterest] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)
    revision_suggestions: List[str] = Field(default_factory=list)

    # Control
    reflection_count: int = Field(default=0, ge=0)
    approved: bool = False
    execution: ExecutionStatus = Field(default_factory=ExecutionStatus)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_request(cls, request: PlanRequest) -> "PlanState":
        return cls(**request.model_dump())

    def get(self, field: str) -> Any:
        return get_field(self, field)

    def merge(self, update: Dict[str, Any]) -> "PlanState":
        return merge_state(self, update)

    @property
    def location_context(self) -> str:
        """Destination text used to disambiguate geocoding queries."""
        if self.destination_country:
            return f"{self.destination}, {self.destination_country}"
        return self.destination

    def with_metadata(self, **entries: Any) -> Dict[str, Any]:
        """Metadata dict with entries added, for use in partial updates."""
        return {**self.metadata, **entries}
