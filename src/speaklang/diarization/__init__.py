"""Heuristic speaker diarization from spectral band energy."""

from speaklang.diarization.aggregate import FeatureAggregator
from speaklang.diarization.features import band_edges, extract_features
from speaklang.diarization.identify import SpeakerIdentifier, weighted_distance
from speaklang.diarization.session import DiarizationSession

__all__ = [
    "DiarizationSession",
    "FeatureAggregator",
    "SpeakerIdentifier",
    "band_edges",
    "extract_features",
    "weighted_distance",
]
