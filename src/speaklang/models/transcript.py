"""Transcript data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TranscriptSegment(BaseModel):
    """One finalized utterance attributed to a speaker."""

    model_config = ConfigDict(frozen=True)

    speaker: str
    text: str
    timestamp: str
    at_ms: float = 0.0


class Transcript(BaseModel):
    """Ordered transcript of one listening session."""

    version: str = "1.0"
    source: str | None = None
    segments: list[TranscriptSegment] = Field(default_factory=list)

    @property
    def speakers(self) -> list[str]:
        seen: list[str] = []
        for seg in self.segments:
            if seg.speaker not in seen:
                seen.append(seg.speaker)
        return seen

    @property
    def text(self) -> str:
        return " ".join(seg.text for seg in self.segments)
