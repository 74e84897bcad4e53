"""
Free-text action parsing for the ReAct loop.

parse_action() is a two-tier parser: an explicit "Action: <token>" line
wins; otherwise the first keyword found (in KEYWORD_ACTIONS order)
decides; otherwise the loop falls back to searching. It never fails.
"""

import re
from typing import Tuple

SEARCH = "search_attractions"
VALIDATE_BUDGET = "validate_budget"
GENERATE = "generate_itinerary"
GEOCODE = "geocode_location"
NEARBY = "search_nearby"
FINISH = "finish"

DEFAULT_ACTION = SEARCH

_ACTION_PATTERN = re.compile(r"\bAction:\s*\[?\s*([\w-]+)", re.IGNORECASE)
_THOUGHT_PATTERN = re.compile(r"\bThought:\s*(.+?)(?=\n\s*Action:|\Z)", re.IGNORECASE | re.DOTALL)

# Checked in order; the first keyword present in the text wins.
KEYWORD_ACTIONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("search", "attraction"), SEARCH),
    (("budget", "validate"), VALIDATE_BUDGET),
    (("generate", "itinerary"), GENERATE),
    (("finish", "complete"), FINISH),
)

_TERMINAL_ALIASES = {"finish", "finished", "complete", "done", "final_answer"}


def parse_action(text: str) -> str:
    """
    Resolve the action a reasoning response asks for.

    Args:
        text: Raw reasoning response

    Returns:
        The action token (lower-case), FINISH for terminal requests, or
        DEFAULT_ACTION when nothing can be determined
    """
    text = text or ""
    match = _ACTION_PATTERN.search(text)
    if match:
        token = match.group(1).strip().lower().replace("-", "_")
        return FINISH if token in _TERMINAL_ALIASES else token

    lowered = text.lower()
    for keywords, action in KEYWORD_ACTIONS:
        if any(keyword in lowered for keyword in keywords):
            return action
    return DEFAULT_ACTION


def parse_thought(text: str) -> str:
    """The "Thought:" section of a response, or the whole response trimmed."""
    text = (text or "").strip()
    match = _THOUGHT_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text
