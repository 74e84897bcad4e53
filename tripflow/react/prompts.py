"""Prompt construction for the ReAct reasoning step."""

from typing import Dict, List, Sequence

from tripflow.react.actions import FINISH
from tripflow.react.schemas import ReActStep
from tripflow.shared.schemas import PlanState


REASONING_TEMPLATE = """You are a travel planning agent working step by step.

CURRENT STATE:
{state_summary}
{conversation}
AVAILABLE ACTIONS:
{menu}
- {finish}: Stop when the plan is complete.

RECENT STEPS:
{history}

Decide the single next action. Respond exactly in this format:
Thought: <your reasoning>
Action: <action name>"""


def summarize_state(state: PlanState) -> str:
    budget_line = "not validated"
    if state.budget_check is not None:
        check = state.budget_check
        status = "within budget" if check.within_budget else "OVER budget"
        budget_line = f"${check.total_cost:.2f} of ${check.budget:.2f} ({status})"

    geocoded = sum(1 for c in state.geo_data.values() if c.success)
    lines = [
        f"- Destination: {state.location_context or 'unknown'}",
        f"- Duration: {state.duration_days} days, party of {state.party_size}",
        f"- Budget: ${state.budget:.2f}",
        f"- Preferences: {state.preferences or 'none given'}",
        f"- Attractions found: {len(state.attractions)}",
        f"- Budget check: {budget_line}",
        f"- Locations geocoded: {geocoded}",
        f"- Nearby places found: {len(state.nearby_places)}",
        f"- Itinerary days: {len(state.itinerary)}",
    ]
    return "\n".join(lines)


def format_history(steps: Sequence[ReActStep], window: int, truncate: int) -> str:
    if not steps:
        return "(none yet)"
    lines = []
    recent = list(steps)[-window:] if window > 0 else []
    for step in recent:
        thought = step.thought
        if len(thought) > truncate:
            thought = thought[:truncate] + "..."
        status = "ok" if step.success else "failed"
        lines.append(
            f"Step {step.iteration}: Thought: {thought} | Action: {step.action} "
            f"| Observation ({status}): {step.observation}"
        )
    return "\n".join(lines)


def format_conversation(messages: List[Dict[str, str]]) -> str:
    if not messages:
        return ""
    lines = [f"- {m['role']}: {m['content']}" for m in messages]
    return "\nCONVERSATION SO FAR:\n" + "\n".join(lines) + "\n"


def build_reasoning_prompt(
    state: PlanState,
    steps: Sequence[ReActStep],
    menu: str,
    window: int = 3,
    truncate: int = 100,
    conversation: List[Dict[str, str]] = None,
) -> str:
    return REASONING_TEMPLATE.format(
        state_summary=summarize_state(state),
        conversation=format_conversation(conversation or []),
        menu=menu,
        finish=FINISH,
        history=format_history(steps, window, truncate),
    )
