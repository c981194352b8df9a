"""Listening session lifecycle: capture → diarize → transcript → analysis."""

from __future__ import annotations

from typing import Callable, Literal

from speaklang.analysis.client import LanguageAnalysisClient, StatusCallback
from speaklang.capture.audio import AudioTap
from speaklang.capture.recognition import (
    FinalText,
    PartialText,
    RecognitionError,
    TranscriptionAdapter,
)
from speaklang.diarization.session import DiarizationSession
from speaklang.models.analysis import AnalysisResult
from speaklang.models.config import DiarizationConfig
from speaklang.models.transcript import Transcript, TranscriptSegment
from speaklang.utils.progress import log, log_error, log_step, log_success

SessionStatus = Literal["idle", "listening", "stopped", "analyzing", "error"]


class ListeningSession:
    """Drives one recording session from a single event-processing context.

    Before each recognition event, the audio tap is sampled every
    ``sample_interval_ms`` of session time up to the event's timestamp,
    so samples and finals are processed in timeline order.
    """

    def __init__(
        self,
        tap: AudioTap,
        adapter: TranscriptionAdapter,
        *,
        config: DiarizationConfig | None = None,
        analysis_client: LanguageAnalysisClient | None = None,
    ) -> None:
        self.tap = tap
        self.adapter = adapter
        self.config = config or DiarizationConfig()
        self.analysis_client = analysis_client
        self.status: SessionStatus = "idle"
        self.partial = ""
        self.diarization: DiarizationSession | None = None
        self.analysis: AnalysisResult | None = None
        self.segments: list[TranscriptSegment] = []
        self._next_tick_ms = 0.0

    def run(
        self,
        *,
        on_partial: Callable[[str], None] | None = None,
        on_segment: Callable[[TranscriptSegment], None] | None = None,
    ) -> Transcript:
        """Listen until the recognizer ends or stop() is called.

        The tap and recognizer are released on every exit path.
        """
        if self.status in ("listening", "analyzing"):
            raise RuntimeError(f"Session is busy ({self.status})")

        self.diarization = DiarizationSession(self.config)
        self.segments = []
        self.partial = ""
        self.analysis = None
        self._next_tick_ms = 0.0
        self.status = "listening"
        log_step("Session", "Listening...")

        try:
            self.adapter.start()
            for event in self.adapter.events():
                self._advance_audio(event.at_ms)
                if isinstance(event, PartialText):
                    self.partial = event.text
                    if on_partial:
                        on_partial(event.text)
                elif isinstance(event, FinalText) and event.text.strip():
                    segment = self.diarization.finalize(event.text, event.at_ms)
                    self.segments.append(segment)
                    self.partial = ""
                    if on_segment:
                        on_segment(segment)
        except RecognitionError as e:
            self.status = "error"
            log_error(f"Recognition failed: {e}")
            raise
        except Exception as e:
            self.status = "error"
            log_error(f"Session failed: {e}")
            raise
        finally:
            self.adapter.stop()
            self.tap.close()

        self.status = "stopped"
        speakers = len(self.diarization.identifier.profiles)
        log_success(f"Session stopped: {len(self.segments)} segments, {speakers} speaker(s)")
        return Transcript(segments=list(self.segments))

    def stop(self) -> None:
        """Stop capturing; an in-flight analysis is not aborted."""
        self.adapter.stop()

    def analyze(self, *, on_status: StatusCallback | None = None) -> AnalysisResult:
        """Run language analysis on the current transcript."""
        if self.analysis_client is None:
            raise RuntimeError("No analysis client configured")
        if self.status == "analyzing":
            raise RuntimeError("An analysis is already in progress")
        if not self.segments:
            self.analysis = AnalysisResult.failure(
                "error", "No transcript to analyze. Record something before analyzing."
            )
            return self.analysis

        self.status = "analyzing"
        try:
            self.analysis = self.analysis_client.analyze(self.segments, on_status=on_status)
        finally:
            self.status = "idle"
        log(f"Analysis finished: {self.analysis.status}")
        return self.analysis

    def _advance_audio(self, until_ms: float) -> None:
        step = self.config.sample_interval_ms
        while self._next_tick_ms <= until_ms:
            frame = self.tap.read_frame(self._next_tick_ms)
            if frame is not None:
                self.diarization.sample(frame, self._next_tick_ms)
            self._next_tick_ms += step
