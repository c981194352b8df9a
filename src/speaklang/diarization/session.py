"""Per-session diarization state: extractor → aggregator → identifier."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from speaklang.diarization.aggregate import FeatureAggregator
from speaklang.diarization.features import extract_features
from speaklang.diarization.identify import SpeakerIdentifier
from speaklang.models.config import DiarizationConfig
from speaklang.models.features import FeatureVector
from speaklang.models.transcript import TranscriptSegment


def format_timestamp(at_ms: float) -> str:
    seconds = int(at_ms // 1000)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class DiarizationSession:
    """Owns the speaker registry and sample buffer of one listening session.

    Built fresh on every session start and dropped on stop. All methods
    must be called from the single event-processing context.
    """

    def __init__(self, config: DiarizationConfig | None = None) -> None:
        self.config = config or DiarizationConfig()
        self.aggregator = FeatureAggregator(window_ms=self.config.window_ms)
        self.identifier = SpeakerIdentifier(self.config)
        self.segments: list[TranscriptSegment] = []
        self.samples_seen = 0
        self.silent_frames = 0

    def sample(self, frame: Sequence[int] | np.ndarray, now_ms: float) -> FeatureVector | None:
        """Feed one analyser frame; silent frames are dropped."""
        features = extract_features(
            frame,
            min_total_energy=self.config.min_total_energy,
            proportions=self.config.band_proportions,
        )
        if features is None:
            self.silent_frames += 1
            return None
        self.samples_seen += 1
        self.aggregator.add(features, now_ms)
        return features

    def finalize(
        self,
        text: str,
        now_ms: float,
        *,
        timestamp: str | None = None,
    ) -> TranscriptSegment:
        """Attribute a finalized utterance to a speaker and record it."""
        vector = self.aggregator.consume(now_ms)
        speaker = self.identifier.classify(vector, now_ms)
        segment = TranscriptSegment(
            speaker=speaker,
            text=text.strip(),
            timestamp=timestamp or format_timestamp(now_ms),
            at_ms=now_ms,
        )
        self.segments.append(segment)
        return segment
