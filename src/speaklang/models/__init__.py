"""Pydantic data models for speaklang."""

from speaklang.models.analysis import AnalysisResult, SpeakerLanguage
from speaklang.models.config import (
    AnalysisConfig,
    AppConfig,
    DiarizationConfig,
    RecognitionConfig,
    ServerConfig,
)
from speaklang.models.features import FeatureVector, VoiceSample
from speaklang.models.speakers import SpeakerProfile
from speaklang.models.transcript import Transcript, TranscriptSegment

__all__ = [
    "AnalysisResult",
    "SpeakerLanguage",
    "AnalysisConfig",
    "AppConfig",
    "DiarizationConfig",
    "RecognitionConfig",
    "ServerConfig",
    "FeatureVector",
    "VoiceSample",
    "SpeakerProfile",
    "Transcript",
    "TranscriptSegment",
]
