"""Helpers for pulling structured answers out of free-form model output."""

import json
import re
from collections.abc import Iterator
from typing import Any

FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


def _balanced_objects(text: str) -> Iterator[str]:
    """Balanced {...} spans in text, in order, ignoring braces inside JSON strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = None
        for index in range(start, len(text)):
            char = text[index]
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
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    end = index
                    break

        if end is None:
            start = text.find("{", start + 1)
            continue
        yield text[start : end + 1]
        start = text.find("{", end + 1)


def _candidates(text: str) -> Iterator[str]:
    fenced = FENCED_JSON.search(text)
    if fenced:
        yield fenced.group(1)
    yield from _balanced_objects(text)


def extract_json_object(text: str | None) -> dict[str, Any]:
    """
    Parse the first JSON object in a model reply.

    Tries a fenced ```json block first, then each balanced brace pair in order.

    Raises:
        ValueError: no JSON object could be found or parsed.
    """
    if not text:
        raise ValueError("Empty model response")

    for candidate in _candidates(text):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise ValueError("No JSON object found in model response")


def coerce_industry(value: Any) -> Any:
    """Collapse an industry answered as an object into a single label."""
    if isinstance(value, dict):
        label = value.get("primary") or value.get("NAICS")
        return str(label) if label else json.dumps(value)
    return value
