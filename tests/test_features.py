"""Tests for feature extraction and the sample window."""

import unittest

import numpy as np

from speaklang.diarization.aggregate import FeatureAggregator
from speaklang.diarization.features import band_edges, extract_features
from speaklang.models.features import FeatureVector


class TestBandEdges(unittest.TestCase):

    def test_default_split_of_1024_bins(self):
        """15/15/20/50 split lands on rounded bin boundaries."""
        self.assertEqual(band_edges(1024), [0, 154, 307, 512, 1024])

    def test_bands_cover_every_bin_once(self):
        """Edges start at 0, end at n and never go backwards."""
        for n in (4, 7, 100, 513, 2048):
            edges = band_edges(n)
            self.assertEqual(edges[0], 0)
            self.assertEqual(edges[-1], n)
            self.assertEqual(edges, sorted(edges))
            self.assertEqual(len(edges), 5)


class TestExtractFeatures(unittest.TestCase):

    def test_all_zero_frame_is_silence(self):
        """A frame with no energy yields no features."""
        self.assertIsNone(extract_features(np.zeros(1024, dtype=np.uint8)))
        self.assertIsNone(extract_features([0] * 16, min_total_energy=0))

    def test_quiet_frame_below_floor_is_silence(self):
        self.assertIsNone(extract_features(np.ones(512, dtype=np.uint8)))

    def test_flat_frame(self):
        """Band sums, centroid and ratios for a flat spectrum."""
        fv = extract_features(np.full(1024, 10, dtype=np.uint8))

        self.assertIsNotNone(fv)
        self.assertEqual(fv.bands, (1540.0, 1530.0, 2050.0, 5120.0))
        self.assertEqual(fv.total_energy, 10240.0)
        self.assertAlmostEqual(fv.avg_energy, 10.0)
        self.assertAlmostEqual(fv.spectral_centroid, 511.5)
        self.assertAlmostEqual(fv.low_mid_ratio, 1540.0 / 2051.0)
        self.assertAlmostEqual(fv.high_mid_ratio, 5120.0 / 2051.0)

    def test_band_sums_add_up_to_total(self):
        rng = np.random.default_rng(7)
        frame = rng.integers(0, 256, size=1024, dtype=np.uint8)
        fv = extract_features(frame)
        self.assertAlmostEqual(sum(fv.bands), fv.total_energy)

    def test_centroid_of_single_bin(self):
        frame = np.zeros(64, dtype=np.uint8)
        frame[10] = 255
        fv = extract_features(frame, min_total_energy=100)
        self.assertAlmostEqual(fv.spectral_centroid, 10.0)

    def test_ratio_denominator_offset(self):
        """An empty mid band divides by 1, not 0."""
        frame = np.zeros(100, dtype=np.uint8)
        frame[:15] = 100
        fv = extract_features(frame, min_total_energy=0)
        self.assertEqual(fv.mid, 0.0)
        self.assertEqual(fv.low_mid_ratio, 1500.0)

    def test_deterministic_and_pure(self):
        """Same input gives the same output and is not modified."""
        rng = np.random.default_rng(3)
        frame = rng.integers(0, 256, size=1024, dtype=np.uint8)
        before = frame.copy()

        first = extract_features(frame)
        second = extract_features(frame)

        self.assertEqual(first, second)
        np.testing.assert_array_equal(frame, before)


def _vector(avg_energy: float) -> FeatureVector:
    return FeatureVector(avg_energy=avg_energy, low=avg_energy * 2)


class TestFeatureAggregator(unittest.TestCase):

    def test_empty_window_gives_no_feature(self):
        self.assertIsNone(FeatureAggregator().consume(1000))

    def test_mean_of_trailing_window(self):
        """Only samples from the last 500 ms are averaged, equally weighted."""
        agg = FeatureAggregator(window_ms=500)
        for t in range(0, 1001, 100):
            agg.add(_vector(float(t)), t)

        mean = agg.consume(1000)

        self.assertAlmostEqual(mean.avg_energy, 750.0)
        self.assertAlmostEqual(mean.low, 1500.0)

    def test_consume_clears_buffer(self):
        agg = FeatureAggregator()
        agg.add(_vector(1.0), 0)
        agg.consume(0)
        self.assertEqual(len(agg), 0)
        self.assertIsNone(agg.consume(100))

    def test_stale_samples_dropped_on_consume(self):
        agg = FeatureAggregator(window_ms=500)
        agg.add(_vector(5.0), 0)
        self.assertIsNone(agg.consume(2000))


if __name__ == "__main__":
    unittest.main()
