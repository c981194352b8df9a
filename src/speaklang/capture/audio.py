"""Audio taps: frequency-domain energy snapshots on demand."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import numpy as np

MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0


class AudioTap(Protocol):
    """Source of byte-scaled frequency magnitudes at a point in time."""

    def read_frame(self, at_ms: float) -> np.ndarray | None: ...
    def close(self) -> None: ...


def byte_frequency_data(
    samples: np.ndarray,
    fft_size: int = 2048,
    *,
    min_db: float = MIN_DECIBELS,
    max_db: float = MAX_DECIBELS,
) -> np.ndarray:
    """Magnitude spectrum scaled to 0-255, one value per bin.

    Mirrors a browser analyser node without time smoothing: Blackman
    window, |FFT| / fft_size, dB range [min_db, max_db] mapped linearly
    onto the byte range. Returns ``fft_size // 2`` bins.
    """
    frame = np.zeros(fft_size, dtype=np.float64)
    tail = np.asarray(samples, dtype=np.float64)[-fft_size:]
    frame[fft_size - tail.size :] = tail

    spectrum = np.fft.rfft(frame * np.blackman(fft_size))[: fft_size // 2]
    magnitude = np.abs(spectrum) / fft_size

    with np.errstate(divide="ignore"):
        db = 20.0 * np.log10(magnitude)
    scaled = 255.0 * (db - min_db) / (max_db - min_db)
    return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)


class FileAudioTap:
    """Replays an audio file as analyser snapshots on the session clock."""

    def __init__(self, path: Path | str, *, fft_size: int = 2048) -> None:
        try:
            import soundfile as sf
        except ImportError:
            raise ImportError(
                "soundfile is required to read audio files. "
                "Install with: pip install soundfile"
            )

        self.path = Path(path)
        self.fft_size = fft_size
        audio, self.sample_rate = sf.read(str(self.path), dtype="float32")

        # Use first channel if stereo
        if audio.ndim > 1:
            audio = audio[:, 0]
        self._audio: np.ndarray | None = audio

    @property
    def duration_ms(self) -> float:
        if self._audio is None:
            return 0.0
        return len(self._audio) * 1000.0 / self.sample_rate

    @property
    def closed(self) -> bool:
        return self._audio is None

    def read_frame(self, at_ms: float) -> np.ndarray | None:
        """Spectrum of the ``fft_size`` samples ending at ``at_ms``."""
        if self._audio is None:
            raise ValueError(f"Audio tap for {self.path.name} is closed")
        end = int(at_ms * self.sample_rate / 1000)
        if end <= 0 or end > len(self._audio):
            return None
        start = max(0, end - self.fft_size)
        return byte_frequency_data(self._audio[start:end], self.fft_size)

    def close(self) -> None:
        self._audio = None

    def __enter__(self) -> FileAudioTap:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
