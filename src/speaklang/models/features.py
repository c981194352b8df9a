"""Spectral feature models used as a speaker fingerprint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FeatureVector(BaseModel):
    """Spectral summary of one audio frame."""

    avg_energy: float = Field(default=0.0, ge=0.0)
    low: float = Field(default=0.0, ge=0.0)
    mid_low: float = Field(default=0.0, ge=0.0)
    mid: float = Field(default=0.0, ge=0.0)
    high: float = Field(default=0.0, ge=0.0)
    spectral_centroid: float = Field(default=0.0, ge=0.0)
    total_energy: float = Field(default=0.0, ge=0.0)
    low_mid_ratio: float = Field(default=0.0, ge=0.0)
    high_mid_ratio: float = Field(default=0.0, ge=0.0)

    @property
    def bands(self) -> tuple[float, float, float, float]:
        return (self.low, self.mid_low, self.mid, self.high)

    def blend(self, other: FeatureVector, keep: float) -> FeatureVector:
        """Mix each field as ``keep * self + (1 - keep) * other``."""
        take = 1.0 - keep
        return FeatureVector(**{
            name: keep * getattr(self, name) + take * getattr(other, name)
            for name in FeatureVector.model_fields
        })

    @classmethod
    def mean(cls, vectors: list[FeatureVector]) -> FeatureVector | None:
        """Element-wise mean with equal weighting; None for an empty list."""
        if not vectors:
            return None
        n = len(vectors)
        return cls(**{
            name: sum(getattr(v, name) for v in vectors) / n
            for name in cls.model_fields
        })


class VoiceSample(BaseModel):
    """A feature vector captured at a point on the session clock."""

    features: FeatureVector
    captured_at_ms: float
