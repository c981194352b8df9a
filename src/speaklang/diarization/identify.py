"""Nearest-profile speaker identification with an adaptive threshold.

This is a hand-tuned heuristic, not a speaker-verification model: a
segment either matches the closest known profile or opens a new one.
"""

from __future__ import annotations

import math

from speaklang.models.config import DiarizationConfig
from speaklang.models.features import FeatureVector
from speaklang.models.speakers import SpeakerProfile
from speaklang.utils.progress import log_step

# Distance scaling and weights, tuned by ear on laptop microphones.
# TODO: fit these against a labelled two-speaker recording set.
CENTROID_SCALE = 200.0
CENTROID_WEIGHT = 3.0
ENERGY_SCALE = 50.0
ENERGY_WEIGHT = 2.0
RATIO_WEIGHT = 10.0
BAND_SCALE = 2000.0
BAND_WEIGHT = 1.0

LABEL_PREFIX = "Speaker-"


def weighted_distance(a: FeatureVector, b: FeatureVector) -> float:
    """Weighted Euclidean distance between two feature vectors."""
    total = CENTROID_WEIGHT * ((a.spectral_centroid - b.spectral_centroid) / CENTROID_SCALE) ** 2
    total += ENERGY_WEIGHT * ((a.avg_energy - b.avg_energy) / ENERGY_SCALE) ** 2
    total += RATIO_WEIGHT * (a.low_mid_ratio - b.low_mid_ratio) ** 2
    total += RATIO_WEIGHT * (a.high_mid_ratio - b.high_mid_ratio) ** 2
    for band_a, band_b in zip(a.bands, b.bands):
        total += BAND_WEIGHT * ((band_a - band_b) / BAND_SCALE) ** 2
    return math.sqrt(total)


class SpeakerIdentifier:
    """Registry of speaker profiles for one listening session."""

    def __init__(self, config: DiarizationConfig | None = None) -> None:
        self.config = config or DiarizationConfig()
        self.profiles: list[SpeakerProfile] = []
        self.current: SpeakerProfile | None = None
        self.last_assigned_ms: float | None = None
        self._issued = 0

    @property
    def labels(self) -> list[str]:
        return [p.label for p in self.profiles]

    def classify(self, vector: FeatureVector | None, now_ms: float) -> str:
        """Return the speaker label for a segment's feature vector."""
        if vector is None:
            return self.current.label if self.current else f"{LABEL_PREFIX}1"

        if not self.profiles:
            return self._new_profile(vector, now_ms).label

        best, min_distance = min(
            ((p, weighted_distance(vector, p.features)) for p in self.profiles),
            key=lambda pair: pair[1],
        )
        threshold = self.threshold_for(best, now_ms)

        if min_distance > threshold:
            profile = self._new_profile(vector, now_ms)
            log_step(
                "Speakers",
                f"New speaker {profile.label} (distance {min_distance:.2f} > {threshold:.1f})",
            )
            return profile.label

        best.features = best.features.blend(vector, keep=self.config.profile_keep_weight)
        best.last_seen_ms = now_ms
        best.segment_count += 1
        self.current = best
        self.last_assigned_ms = now_ms
        return best.label

    def threshold_for(self, best: SpeakerProfile, now_ms: float) -> float:
        """Adaptive new-speaker threshold.

        Lower after a pause, higher while the same speaker keeps talking.
        """
        cfg = self.config
        if self.last_assigned_ms is None:
            return cfg.base_threshold

        elapsed = now_ms - self.last_assigned_ms
        if elapsed > cfg.pause_ms:
            return cfg.pause_threshold
        if elapsed < cfg.continuity_ms and best is self.current:
            return cfg.continuity_threshold
        return cfg.base_threshold

    def _new_profile(self, vector: FeatureVector, now_ms: float) -> SpeakerProfile:
        self._issued += 1
        profile = SpeakerProfile(
            label=f"{LABEL_PREFIX}{self._issued}",
            features=vector,
            last_seen_ms=now_ms,
        )
        self.profiles.append(profile)
        self.current = profile
        self.last_assigned_ms = now_ms
        return profile
