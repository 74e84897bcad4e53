"""
Helpers for pulling structured JSON out of free-text LLM responses.

Models frequently wrap JSON in markdown code fences or surround it with
commentary. These helpers strip that noise and hand back parsed values,
raising ParseError when nothing usable is found.
"""

import json
import logging
import re
from typing import Any, List


logger = logging.getLogger(__name__)

_CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class ParseError(Exception):
    """Raised when response parsing fails."""

    pass


def strip_code_fences(raw_response: str) -> str:
    """Return the body of the first fenced code block, or the trimmed input."""
    content = (raw_response or "").strip()
    match = _CODE_BLOCK_PATTERN.search(content)
    if match:
        return match.group(1).strip()
    return content


def extract_json_from_response(raw_response: str) -> str:
    """
    Extract JSON content from LLM response.

    Handles multiple formats:
    - Raw JSON
    - JSON in markdown code blocks (```json ... ```)
    - JSON preceded by commentary ("Here are the results: [...]")

    Args:
        raw_response: Raw LLM response string

    Returns:
        Cleaned JSON string ready for parsing

    Raises:
        ParseError: If the response is empty
    """
    content = strip_code_fences(raw_response)
    if not content:
        raise ParseError("Empty response")

    starts = [i for i in (content.find("{"), content.find("[")) if i >= 0]
    if not starts:
        return content
    start = min(starts)
    opener = content[start]
    closer = "}" if opener == "{" else "]"

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(content)):
        char = content[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return content[start : i + 1]

    # Unbalanced; let the JSON parser report it
    return content[start:]


def parse_json_response(raw_response: str) -> Any:
    """
    Parse a JSON value out of an LLM response.

    Raises:
        ParseError: If no valid JSON could be decoded
    """
    content = extract_json_from_response(raw_response)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug(f"JSON decode failed: {e} | content={content[:200]!r}")
        raise ParseError(f"Invalid JSON: {e}") from e


def parse_json_array(raw_response: str, wrapper_key: str = None) -> List[Any]:
    """
    Parse a JSON array out of an LLM response.

    Some models answer with an object wrapping the array (e.g.
    {"reasons": [...]}). Pass wrapper_key to accept that shape too.

    Raises:
        ParseError: If the decoded value is not an array
    """
    value = parse_json_response(raw_response)
    if isinstance(value, dict) and wrapper_key and isinstance(value.get(wrapper_key), list):
        return value[wrapper_key]
    if not isinstance(value, list):
        raise ParseError(f"Expected JSON array, got {type(value).__name__}")
    return value
