"""Pull structured values out of free-form LLM output."""

from __future__ import annotations

import json
import re

_NUMBER = r"(?<![\w.])(-?[0-9]+(?:\.[0-9]+)?)"

PERCENT_PATTERNS = (
    re.compile(r'"percent"\s*:\s*' + _NUMBER, re.IGNORECASE),
    re.compile(_NUMBER + r"\s*%"),
    re.compile(_NUMBER),
)


def strip_code_fences(text: str) -> str:
    """Drop markdown ``` fence lines around a model response."""
    text = text.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines)
    return text


def extract_json_object(text: str) -> dict | None:
    """Return the first balanced ``{...}`` in ``text`` that parses as a JSON object.

    Braces inside JSON string literals do not count towards nesting.
    Candidates that never close or fail to parse are skipped and
    scanning resumes at the next opening brace.
    """
    text = strip_code_fences(text)
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is None:
            start = text.find("{", start + 1)
            continue
        try:
            value = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def _balanced_end(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def parse_percent(text: str) -> float | None:
    """Find a percentage: ``"percent": N``, then ``N%``, then the first number.

    The value is clamped to [0, 100]; None when no number is present.
    """
    for pattern in PERCENT_PATTERNS:
        match = pattern.search(text)
        if match:
            return clamp_percent(float(match.group(1)))
    return None
