"""Prompt templates for the planning pipeline."""

from tripflow.shared.schemas import PlanState


ITINERARY_TEMPLATE = """Create a detailed {days}-day travel itinerary for {destination}.

Budget: ${budget:.2f} total for {party_size} traveller(s)
Preferences: {preferences}

Available attractions:
{attractions}
{revisions}
Requirements:
- Exactly {days} days, numbered 1 to {days}
- 3-4 activities per day, including meals and accommodation
- Activities must not overlap; leave travel time between distant places
- Start times between 06:00 and 23:00 in HH:MM format
- Stay within the budget

Respond with JSON only, in this format:
{{"days": [{{"dayNumber": 1, "theme": "...", "activities": [{{"name": "...", "type": "activity|dining|accommodation|transportation|other", "startTime": "09:00", "durationMinutes": 120, "estimatedCost": 25.0, "location": "...", "description": "..."}}]}}]}}"""


def build_itinerary_prompt(state: PlanState, max_attractions: int = 20) -> str:
    attractions = "\n".join(
        f"- {a.name} ({a.category}, {a.price or 'price unknown'}): {a.description}"
        for a in state.attractions[:max_attractions]
    ) or "- (none found; use well-known places)"

    revisions = ""
    if state.revision_suggestions:
        revisions = (
            "\nThe previous draft was rejected. Fix these problems:\n"
            + "\n".join(f"- {s}" for s in state.revision_suggestions)
            + "\n"
        )

    return ITINERARY_TEMPLATE.format(
        days=state.duration_days,
        destination=state.location_context,
        budget=state.budget,
        party_size=state.party_size,
        preferences=state.preferences or "none given",
        attractions=attractions,
        revisions=revisions,
    )
