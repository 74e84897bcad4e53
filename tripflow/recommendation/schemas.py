"""
State schema for the recommendation pipeline.

RecommendationState shares the ExecutionStatus record with PlanState by
embedding it; the two workflows otherwise have disjoint fields.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tripflow.shared.contracts.budget import parse_cost
from tripflow.shared.schemas.base import ExecutionStatus, get_field, merge_state


class DestinationType(str, Enum):
    REGION = "region"
    COUNTRY = "country"
    CITY = "city"
    VAGUE = "vague"
    UNKNOWN = "unknown"


class SearchStrategy(str, Enum):
    DESTINATION_FOCUSED = "destination_focused"
    INTEREST_FOCUSED = "interest_focused"
    GENERAL = "general"


class AnalyzedIntent(BaseModel):
    destination_type: DestinationType = DestinationType.UNKNOWN
    search_strategy: SearchStrategy = SearchStrategy.GENERAL
    keywords: List[str] = Field(default_factory=list)


class DestinationCandidate(BaseModel):
    """A destination proposed by the reasoning collaborator."""

    name: str
    country: str = ""
    description: str = ""
    features: List[str] = Field(default_factory=list)
    budget_level: int = Field(default=2, ge=1, le=3)
    match_score: float = 0.0
    recommend_reason: Optional[str] = None

    @field_validator("features", mode="before")
    @classmethod
    def _coerce_features(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("budget_level", mode="before")
    @classmethod
    def _clamp_budget_level(cls, value):
        try:
            level = int(value)
        except (TypeError, ValueError):
            return 2
        return min(max(level, 1), 3)

    @field_validator("match_score", mode="before")
    @classmethod
    def _coerce_score(cls, value):
        return float(parse_cost(value))


class RecommendationState(BaseModel):
    """Inputs and intermediate results of a destination recommendation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Inputs
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    destination_preference: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    mood: Optional[str] = None
    budget_level: int = Field(default=2, ge=1, le=3)
    days: int = Field(default=5, ge=1)
    exclude_names: List[str] = Field(default_factory=list)

    # Pipeline data
    analyzed_intent: Optional[AnalyzedIntent] = None
    candidates: List[DestinationCandidate] = Field(default_factory=list)
    filtered: List[DestinationCandidate] = Field(default_factory=list)
    ranked: List[DestinationCandidate] = Field(default_factory=list)
    recommendations: List[DestinationCandidate] = Field(default_factory=list)
    completed: bool = False

    execution: ExecutionStatus = Field(default_factory=ExecutionStatus)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def get(self, field: str) -> Any:
        return get_field(self, field)

    def merge(self, update: Dict[str, Any]) -> "RecommendationState":
        return merge_state(self, update)
