"""Feature extraction from one frame of frequency-bin magnitudes."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from speaklang.models.features import FeatureVector

DEFAULT_BAND_PROPORTIONS = (0.15, 0.15, 0.20, 0.50)
DEFAULT_MIN_TOTAL_ENERGY = 1000.0


def band_edges(num_bins: int, proportions: Sequence[float] = DEFAULT_BAND_PROPORTIONS) -> list[int]:
    """Split ``num_bins`` into contiguous bands.

    Returns ``len(proportions) + 1`` edges starting at 0 and ending at
    ``num_bins``, so band ``i`` is ``bins[edges[i]:edges[i + 1]]``.
    """
    cumulative = np.cumsum(proportions)
    edges = [0]
    for frac in cumulative[:-1]:
        edges.append(min(num_bins, max(edges[-1], int(round(num_bins * frac)))))
    edges.append(num_bins)
    return edges


def extract_features(
    frame: Sequence[int] | np.ndarray,
    *,
    min_total_energy: float = DEFAULT_MIN_TOTAL_ENERGY,
    proportions: Sequence[float] = DEFAULT_BAND_PROPORTIONS,
) -> FeatureVector | None:
    """Turn byte magnitudes per frequency bin into a FeatureVector.

    Returns None for silence (total energy below ``min_total_energy``, or
    no energy at all). Pure function of the input frame.
    """
    bins = np.asarray(frame, dtype=np.float64)
    if bins.ndim != 1 or bins.size == 0:
        return None

    total = float(bins.sum())
    if total <= 0.0 or total < min_total_energy:
        return None

    edges = band_edges(bins.size, proportions)
    low, mid_low, mid, high = (
        float(bins[edges[i] : edges[i + 1]].sum()) for i in range(4)
    )

    centroid = float(np.dot(np.arange(bins.size), bins) / total)

    return FeatureVector(
        avg_energy=total / bins.size,
        low=low,
        mid_low=mid_low,
        mid=mid,
        high=high,
        spectral_centroid=centroid,
        total_energy=total,
        low_mid_ratio=low / (mid + 1.0),
        high_mid_ratio=high / (mid + 1.0),
    )
