"""Single-number English percentage estimate."""

from __future__ import annotations

from speaklang.analysis.backend import TextGenerator
from speaklang.analysis.parsing import parse_percent
from speaklang.analysis.prompts import ENGLISH_PERCENT_PROMPT
from speaklang.utils.progress import log_step


class PercentParseError(ValueError):
    """Backend response held no usable number."""

    def __init__(self, raw: str) -> None:
        super().__init__("could not parse a percentage from the model response")
        self.raw = raw


def build_percent_prompt(text: str) -> str:
    # keep the transcript from closing the triple-quoted block early
    return ENGLISH_PERCENT_PROMPT.format(transcript_text=text.replace('"""', '"'))


def estimate_english_percent(generator: TextGenerator, text: str) -> float:
    """Ask the backend for the share of English words, in [0, 100].

    Sampling is deterministic (temperature 0). Raises PercentParseError
    with the raw response when no number can be found; backend errors
    propagate unchanged.
    """
    prompt = build_percent_prompt(text)
    log_step("Percent", f"Requesting estimate ({len(text)} chars, model: {generator.model})")

    raw = generator.generate(prompt, temperature=0)
    log_step("Percent", f"Response (truncated): {raw[:500]!r}")

    percent = parse_percent(raw)
    if percent is None:
        raise PercentParseError(raw)
    return percent
