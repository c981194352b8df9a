"""Tests for nearest-profile speaker identification."""

import math
import unittest

from speaklang.diarization.identify import SpeakerIdentifier, weighted_distance
from speaklang.diarization.session import DiarizationSession, format_timestamp
from speaklang.models.config import DiarizationConfig
from speaklang.models.features import FeatureVector


def voice(ratio: float = 0.0, **fields) -> FeatureVector:
    base = dict(
        avg_energy=40.0,
        low=3000.0,
        mid_low=2500.0,
        mid=2000.0,
        high=1000.0,
        spectral_centroid=300.0,
        total_energy=8500.0,
        low_mid_ratio=ratio,
        high_mid_ratio=0.5,
    )
    base.update(fields)
    return FeatureVector(**base)


class TestWeightedDistance(unittest.TestCase):

    def test_identical_vectors(self):
        self.assertEqual(weighted_distance(voice(), voice()), 0.0)

    def test_each_term_weighting(self):
        """Centroid /200 ×3, energy /50 ×2, ratios ×10, bands /2000 ×1."""
        self.assertAlmostEqual(
            weighted_distance(voice(), voice(spectral_centroid=500.0)), math.sqrt(3.0)
        )
        self.assertAlmostEqual(weighted_distance(voice(), voice(avg_energy=90.0)), math.sqrt(2.0))
        self.assertAlmostEqual(weighted_distance(voice(), voice(ratio=1.0)), math.sqrt(10.0))
        self.assertAlmostEqual(weighted_distance(voice(), voice(high_mid_ratio=1.5)), math.sqrt(10.0))
        self.assertAlmostEqual(weighted_distance(voice(), voice(high=3000.0)), 1.0)

    def test_symmetric(self):
        a, b = voice(ratio=0.2), voice(ratio=0.9, avg_energy=10.0)
        self.assertAlmostEqual(weighted_distance(a, b), weighted_distance(b, a))


class TestSpeakerIdentifier(unittest.TestCase):

    def test_missing_vector_before_any_speaker(self):
        """No features and no profiles falls back to Speaker-1 without a profile."""
        ident = SpeakerIdentifier()
        self.assertEqual(ident.classify(None, 0), "Speaker-1")
        self.assertEqual(ident.profiles, [])

    def test_missing_vector_returns_current(self):
        ident = SpeakerIdentifier()
        ident.classify(voice(), 0)
        ident.classify(voice(ratio=3.0), 2000)
        self.assertEqual(ident.classify(None, 2100), "Speaker-2")

    def test_continuous_identical_stream_has_one_speaker(self):
        """Near-identical vectors within 500 ms never open a second speaker."""
        ident = SpeakerIdentifier()
        labels = {ident.classify(voice(), t) for t in range(0, 5000, 400)}
        self.assertEqual(labels, {"Speaker-1"})
        self.assertEqual(len(ident.profiles), 1)

    def test_distant_vectors_after_pause_are_two_speakers(self):
        a, b = voice(), voice(ratio=1.0)
        self.assertGreater(weighted_distance(a, b), 2.5)

        ident = SpeakerIdentifier()
        first = ident.classify(a, 0)
        second = ident.classify(b, 1500)

        self.assertEqual((first, second), ("Speaker-1", "Speaker-2"))

    def test_labels_are_sequential_and_never_reused(self):
        ident = SpeakerIdentifier()
        labels = [
            ident.classify(voice(ratio=0.0), 0),
            ident.classify(voice(ratio=1.0), 2000),
            ident.classify(voice(ratio=2.0), 4000),
            ident.classify(voice(ratio=0.0), 6000),
            ident.classify(voice(ratio=3.0), 8000),
        ]
        self.assertEqual(
            labels, ["Speaker-1", "Speaker-2", "Speaker-3", "Speaker-1", "Speaker-4"]
        )
        self.assertEqual(ident.labels, ["Speaker-1", "Speaker-2", "Speaker-3", "Speaker-4"])

    def test_continuity_threshold_keeps_current_speaker(self):
        """Distance ~1.9 within 500 ms of the same speaker stays that speaker."""
        ident = SpeakerIdentifier()
        ident.classify(voice(), 0)
        self.assertEqual(ident.classify(voice(ratio=0.6), 200), "Speaker-1")

    def test_base_threshold_between_500_and_1000_ms(self):
        """The same distance ~1.9 after 700 ms exceeds the 1.5 base threshold."""
        ident = SpeakerIdentifier()
        ident.classify(voice(), 0)
        self.assertEqual(ident.classify(voice(ratio=0.6), 700), "Speaker-2")

    def test_pause_lowers_threshold(self):
        """Distance ~1.2 matches at 700 ms but is a new speaker after a pause."""
        near = voice(ratio=0.38)

        ident = SpeakerIdentifier()
        ident.classify(voice(), 0)
        self.assertEqual(ident.classify(near, 700), "Speaker-1")

        ident = SpeakerIdentifier()
        ident.classify(voice(), 0)
        self.assertEqual(ident.classify(near, 1500), "Speaker-2")

    def test_match_blends_profile(self):
        """A match keeps 80% of the stored vector and takes 20% of the new one."""
        ident = SpeakerIdentifier()
        ident.classify(voice(ratio=0.0), 0)
        ident.classify(voice(ratio=0.5), 100)

        profile = ident.profiles[0]
        self.assertAlmostEqual(profile.features.low_mid_ratio, 0.1)
        self.assertEqual(profile.last_seen_ms, 100)
        self.assertEqual(profile.segment_count, 2)

    def test_thresholds_come_from_config(self):
        config = DiarizationConfig(base_threshold=5.0, pause_threshold=5.0)
        ident = SpeakerIdentifier(config)
        ident.classify(voice(), 0)
        self.assertEqual(ident.classify(voice(ratio=1.0), 3000), "Speaker-1")


class TestDiarizationSession(unittest.TestCase):

    def test_finalize_without_samples(self):
        session = DiarizationSession()
        seg = session.finalize("  hello  ", 1500)
        self.assertEqual(seg.speaker, "Speaker-1")
        self.assertEqual(seg.text, "hello")
        self.assertEqual(seg.timestamp, "00:01")
        self.assertEqual(session.segments, [seg])

    def test_silent_frames_are_counted_not_buffered(self):
        session = DiarizationSession()
        self.assertIsNone(session.sample([0] * 1024, 0))
        self.assertEqual(session.silent_frames, 1)
        self.assertEqual(len(session.aggregator), 0)

    def test_fresh_session_restarts_labels(self):
        first = DiarizationSession()
        first.identifier.classify(voice(), 0)
        first.identifier.classify(voice(ratio=2.0), 2000)

        second = DiarizationSession()
        self.assertEqual(second.identifier.classify(voice(ratio=2.0), 0), "Speaker-1")

    def test_format_timestamp(self):
        self.assertEqual(format_timestamp(0), "00:00")
        self.assertEqual(format_timestamp(125_900), "02:05")


if __name__ == "__main__":
    unittest.main()
