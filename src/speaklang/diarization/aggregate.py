"""Sliding window of voice samples, reduced once per finalized segment."""

from __future__ import annotations

from collections import deque

from speaklang.models.features import FeatureVector, VoiceSample


class FeatureAggregator:
    """Keeps the trailing ``window_ms`` of samples.

    ``consume`` averages the window (equal weights) and empties it.
    """

    def __init__(self, window_ms: float = 500.0) -> None:
        self.window_ms = window_ms
        self._samples: deque[VoiceSample] = deque()

    def __len__(self) -> int:
        return len(self._samples)

    def add(self, features: FeatureVector, now_ms: float) -> None:
        self._samples.append(VoiceSample(features=features, captured_at_ms=now_ms))
        self._prune(now_ms)

    def consume(self, now_ms: float) -> FeatureVector | None:
        """Representative vector for the segment just finalized."""
        self._prune(now_ms)
        vector = FeatureVector.mean([s.features for s in self._samples])
        self._samples.clear()
        return vector

    def clear(self) -> None:
        self._samples.clear()

    def _prune(self, now_ms: float) -> None:
        cutoff = now_ms - self.window_ms
        while self._samples and self._samples[0].captured_at_ms < cutoff:
            self._samples.popleft()
