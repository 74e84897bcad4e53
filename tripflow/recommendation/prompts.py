"""Prompt templates for the recommendation pipeline."""

from typing import List

from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState

_BUDGET_LABELS = {1: "budget", 2: "moderate", 3: "luxury"}


CANDIDATES_TEMPLATE = """Suggest {count} travel destinations for this traveller.

Destination preference: {preference}
Interests: {interests}
Mood: {mood}
Budget level: {budget} ({budget_level}/3)
Trip length: {days} days
{exclusions}
Respond with a JSON array only. Each element:
{{"name": "...", "country": "...", "description": "...", "features": ["..."], "budgetLevel": 1-3, "matchScore": 0-100}}"""


RANKING_TEMPLATE = """Rank these destinations from best to worst match for a traveller
interested in {interests} (mood: {mood}, budget level {budget_level}/3, {days} days).

{candidates}

Respond with a JSON array of the candidate numbers in ranked order, e.g. [3, 1, 2]."""


REASONS_TEMPLATE = """Write one short, specific sentence explaining why each destination suits
a traveller interested in {interests} (mood: {mood}, {days} days).

{candidates}

Respond with a JSON array only: [{{"index": 1, "reason": "..."}}]"""


def _numbered(candidates: List[DestinationCandidate]) -> str:
    return "\n".join(
        f"{i}. {c.name}, {c.country}: {c.description}"
        + (f" (features: {', '.join(c.features)})" if c.features else "")
        for i, c in enumerate(candidates, start=1)
    )


def _interests(state: RecommendationState) -> str:
    return ", ".join(state.interests) or "general sightseeing"


def build_candidates_prompt(state: RecommendationState, count: int) -> str:
    exclusions = ""
    if state.exclude_names:
        exclusions = f"Do NOT suggest: {', '.join(state.exclude_names)}\n"
    return CANDIDATES_TEMPLATE.format(
        count=count,
        preference=state.destination_preference or "anywhere",
        interests=_interests(state),
        mood=state.mood or "any",
        budget=_BUDGET_LABELS.get(state.budget_level, "moderate"),
        budget_level=state.budget_level,
        days=state.days,
        exclusions=exclusions,
    )


def build_ranking_prompt(state: RecommendationState, candidates: List[DestinationCandidate]) -> str:
    return RANKING_TEMPLATE.format(
        interests=_interests(state),
        mood=state.mood or "any",
        budget_level=state.budget_level,
        days=state.days,
        candidates=_numbered(candidates),
    )


def build_reasons_prompt(state: RecommendationState, candidates: List[DestinationCandidate]) -> str:
    return REASONS_TEMPLATE.format(
        interests=_interests(state),
        mood=state.mood or "any",
        days=state.days,
        candidates=_numbered(candidates),
    )
