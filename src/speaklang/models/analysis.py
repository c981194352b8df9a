"""Language analysis result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AnalysisStatus = Literal[
    "ok",
    "retrying",
    "error",
    "unavailable",
    "quota_exceeded",
    "parse_error",
]


class SpeakerLanguage(BaseModel):
    """Language breakdown for one speaker."""

    model_config = ConfigDict(populate_by_name=True)

    speaker: str
    languages: list[str] = Field(default_factory=list)
    english_percentage: float | None = Field(default=None, alias="englishPercentage")
    details: str = ""


class AnalysisResult(BaseModel):
    """Outcome of one analysis call (or an error/retrying variant)."""

    model_config = ConfigDict(populate_by_name=True)

    status: AnalysisStatus = "ok"
    speakers: list[SpeakerLanguage] = Field(default_factory=list)
    overall_english_percentage: float | None = Field(
        default=None, alias="overallEnglishPercentage"
    )
    non_english_languages: list[str] = Field(
        default_factory=list, alias="nonEnglishLanguages"
    )
    summary: str = ""
    message: str | None = None
    raw_response: str | None = None
    attempt: int | None = None
    retry_in_seconds: float | None = None

    @property
    def is_error(self) -> bool:
        return self.status not in ("ok", "retrying")

    @classmethod
    def failure(
        cls,
        status: AnalysisStatus,
        message: str,
        *,
        raw_response: str | None = None,
    ) -> AnalysisResult:
        return cls(status=status, message=message, raw_response=raw_response)

    @classmethod
    def retrying(cls, attempt: int, retry_in_seconds: float) -> AnalysisResult:
        return cls(
            status="retrying",
            attempt=attempt,
            retry_in_seconds=retry_in_seconds,
            message=f"Model overloaded, retrying in {retry_in_seconds:.0f}s (attempt {attempt})",
        )
