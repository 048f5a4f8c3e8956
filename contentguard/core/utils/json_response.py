"""Helpers for turning AI completion text into JSON objects.

Providers are asked for a bare JSON object but frequently wrap it in a markdown code
fence or surround it with prose. ``parse_json_response`` handles both and raises
``ResponseParseError`` when nothing usable can be recovered.
"""

import json
import re
from typing import Any

from contentguard.core.exception import ResponseParseError
from contentguard.core.logging import get_logger

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of the first markdown code fence, or the stripped text."""
    text = text.strip()
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()

    # Unterminated fence (truncated completion)
    if text.startswith("```"):
        text = text[3:]
        if text[:4].lower() == "json":
            text = text[4:]
    return text.strip()


def extract_first_object(text: str) -> str | None:
    """Find the first balanced ``{...}`` block, ignoring braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escape_next = False

        for index in range(start, len(text)):
            char = text[index]
            if escape_next:
                escape_next = False
                continue
            if char == "\\":
                escape_next = True
                continue
            if char == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]

        start = text.find("{", start + 1)

    return None


def _repair_json(text: str) -> str:
    """
    Attempt to repair common JSON issues from AI-generated responses.

    Handles:
    - Unterminated strings (adds closing quote)
    - Missing closing brackets/braces
    - Trailing commas
    """
    text = re.sub(r",\s*([}\]])", r"\1", text)

    open_braces = text.count("{") - text.count("}")
    open_brackets = text.count("[") - text.count("]")

    in_string = False
    escape_next = False

    for char in text:
        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string

    if in_string:
        text = text + '"'
        logger.debug("Repaired: Added closing quote for unterminated string")

    if open_brackets > 0:
        text = text.rstrip(",\n\t ")
        text = text + ("]" * open_brackets)
        logger.debug(f"Repaired: Added {open_brackets} closing bracket(s)")

    if open_braces > 0:
        text = text.rstrip(",\n\t ")
        text = text + ("}" * open_braces)
        logger.debug(f"Repaired: Added {open_braces} closing brace(s)")

    return text


def _loads_object(text: str) -> dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_json_response(content: str | None, provider: str | None = None) -> dict[str, Any]:
    """Parse a completion body into a JSON object.

    Order of attempts: fence-stripped text as-is, the first balanced ``{...}`` block,
    then a repaired version of the fence-stripped text.

    Raises:
        ResponseParseError: If no attempt yields a JSON object
    """
    if not content or not content.strip():
        raise ResponseParseError("Empty completion body", provider=provider)

    text = strip_code_fences(content)

    try:
        return _loads_object(text)
    except ValueError as parse_error:
        logger.debug(f"Direct JSON parse failed: {parse_error}. Scanning for an object block...")

    block = extract_first_object(content)
    if block is not None:
        try:
            return _loads_object(block)
        except ValueError:
            logger.debug("First object block is not valid JSON, attempting repair...")

    try:
        data = _loads_object(_repair_json(text))
        logger.info("JSON repair successful")
        return data
    except ValueError as e:
        raise ResponseParseError(f"Malformed completion body: {e}", provider=provider) from e
