"""Per-speaker language analysis via the text-generation backend."""

from __future__ import annotations

import time
from typing import Callable, Sequence, Union

from pydantic import ValidationError
from tenacity import RetryCallState

from speaklang.analysis.backend import (
    BackendError,
    BackendOverloadedError,
    QuotaExceededError,
    TextGenerator,
    UpstreamError,
)
from speaklang.analysis.parsing import extract_json_object
from speaklang.analysis.prompts import LANGUAGE_ANALYSIS_PROMPT
from speaklang.models.analysis import AnalysisResult
from speaklang.models.transcript import TranscriptSegment
from speaklang.utils.progress import log_step, log_warning
from speaklang.utils.retry import retry_on_overload

TranscriptInput = Union[str, Sequence[TranscriptSegment]]
StatusCallback = Callable[[AnalysisResult], None]


def format_transcript(transcript: TranscriptInput) -> str:
    """Render segments as ``Speaker: text`` lines; strings pass through."""
    if isinstance(transcript, str):
        return transcript.strip()
    return "\n".join(f"{seg.speaker}: {seg.text}" for seg in transcript if seg.text.strip())


class LanguageAnalysisClient:
    """Asks the backend which languages each speaker used.

    Overload errors are retried with linear backoff (``backoff_seconds``,
    then twice that, and so on) up to ``max_retries`` times. Every failure
    comes back as an AnalysisResult variant rather than an exception.
    """

    def __init__(
        self,
        generator: TextGenerator,
        *,
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.generator = generator
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def analyze(
        self,
        transcript: TranscriptInput,
        *,
        on_status: StatusCallback | None = None,
    ) -> AnalysisResult:
        transcript_text = format_transcript(transcript)
        if not transcript_text:
            return AnalysisResult.failure("error", "No transcript to analyze")

        prompt = LANGUAGE_ANALYSIS_PROMPT.format(transcript_text=transcript_text)
        log_step("Analysis", f"Sending transcript to {self.generator.model}")

        def before_sleep(state: RetryCallState) -> None:
            delay = state.next_action.sleep if state.next_action else 0.0
            log_warning(
                f"Model overloaded — retry {state.attempt_number}/{self.max_retries} in {delay:.0f}s"
            )
            if on_status:
                on_status(AnalysisResult.retrying(state.attempt_number, delay))

        generate = retry_on_overload(
            BackendOverloadedError,
            max_retries=self.max_retries,
            step_seconds=self.backoff_seconds,
            sleep=self._sleep,
            before_sleep=before_sleep,
        )(self.generator.generate)

        try:
            text = generate(prompt)
        except BackendOverloadedError as e:
            return AnalysisResult.failure(
                "unavailable",
                f"Model is overloaded or unavailable after {self.max_retries} retries — please try again later.",
                raw_response=e.body or None,
            )
        except QuotaExceededError as e:
            return AnalysisResult.failure(
                "quota_exceeded",
                "API quota exceeded — check your plan and billing details.",
                raw_response=e.body or None,
            )
        except UpstreamError as e:
            return AnalysisResult.failure(
                "error",
                f"Analysis request failed ({e.status_code})",
                raw_response=e.body or None,
            )
        except BackendError as e:
            return AnalysisResult.failure("error", str(e) or "Failed to analyze transcript")

        return parse_analysis(text)


def parse_analysis(text: str) -> AnalysisResult:
    """Build an AnalysisResult from the first JSON object in ``text``."""
    data = extract_json_object(text)
    if data is None:
        log_warning("Failed to parse analysis response as JSON")
        return AnalysisResult.failure("parse_error", "Could not parse analysis", raw_response=text)

    data.pop("status", None)
    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        log_warning(f"Analysis response has an unexpected shape: {e.error_count()} error(s)")
        return AnalysisResult.failure("parse_error", "Unexpected analysis format", raw_response=text)
