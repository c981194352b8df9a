"""Configuration models for each speaklang component."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class DiarizationConfig(BaseModel):
    """Configuration for feature extraction and speaker identification."""

    sample_interval_ms: int = Field(default=100, ge=10, le=1000)
    window_ms: int = Field(default=500, ge=100, le=5000)
    fft_size: int = Field(default=2048, ge=256, le=32768)
    min_total_energy: float = Field(default=1000.0, ge=0.0)
    band_proportions: tuple[float, float, float, float] = (0.15, 0.15, 0.20, 0.50)
    base_threshold: float = Field(default=1.5, gt=0.0)
    pause_threshold: float = Field(default=1.0, gt=0.0)
    pause_ms: int = Field(default=1000, ge=0)
    continuity_threshold: float = Field(default=2.5, gt=0.0)
    continuity_ms: int = Field(default=500, ge=0)
    profile_keep_weight: float = Field(default=0.8, ge=0.0, le=1.0)

    @field_validator("band_proportions")
    @classmethod
    def _check_proportions(cls, value: tuple[float, float, float, float]):
        if any(p <= 0 for p in value):
            raise ValueError("band proportions must be positive")
        if abs(sum(value) - 1.0) > 1e-6:
            raise ValueError(f"band proportions must sum to 1.0, got {sum(value):.3f}")
        return value


class RecognitionConfig(BaseModel):
    """Configuration for the speech recognizer used in file replay."""

    model_size: str = "small"
    device: str = "cpu"
    language: str | None = None
    max_restarts: int = Field(default=5, ge=0, le=100)
    queue_size: int = Field(default=256, ge=1)


class AnalysisConfig(BaseModel):
    """Configuration for the language analysis client."""

    llm_model: str = "claude-sonnet-4-6"
    max_tokens: int = Field(default=2048, ge=64, le=16384)
    max_retries: int = Field(default=3, ge=0, le=10)
    backoff_seconds: float = Field(default=2.0, ge=0.0, le=60.0)


class ServerConfig(BaseModel):
    """Configuration for the analyze-language HTTP service."""

    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    llm_model: str = "claude-sonnet-4-6"
    max_tokens: int = Field(default=256, ge=16, le=4096)


class AppConfig(BaseModel):
    """Top-level configuration, optionally loaded from speaklang.yaml."""

    diarization: DiarizationConfig = Field(default_factory=DiarizationConfig)
    recognition: RecognitionConfig = Field(default_factory=RecognitionConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> AppConfig:
        """Load from a YAML file; defaults when path is None."""
        if path is None:
            return cls()
        from speaklang.utils.io import read_yaml

        return cls(**read_yaml(path))
