"""Speaker registry models."""

from __future__ import annotations

from pydantic import BaseModel

from speaklang.models.features import FeatureVector


class SpeakerProfile(BaseModel):
    """A known speaker: running feature average plus last-seen time."""

    label: str
    features: FeatureVector
    last_seen_ms: float
    segment_count: int = 1
