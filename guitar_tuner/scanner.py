"""
Two-pass Goertzel frequency search.

The coarse pass sweeps the whole guitar range on a wide grid to find an
approximate fundamental; the fine pass sweeps a narrow window around that
estimate on a small step.
"""

import logging
from typing import NamedTuple

import numpy as np

from .constants import (
    COARSE_MAX_HZ,
    COARSE_MIN_HZ,
    COARSE_STEP_HZ,
    FINE_RANGE_HZ,
    FINE_STEP_HZ,
    PEAK_THRESHOLD,
    SAMPLE_RATE,
)
from .goertzel import goertzel_magnitude

logger = logging.getLogger(__name__)


class MagnitudeSample(NamedTuple):
    """Magnitude at one scanned frequency."""
    frequency: float
    magnitude: float


def frequency_grid(start: float, stop: float, step: float) -> np.ndarray:
    """Frequencies from ``start`` to ``stop`` inclusive at ``step`` spacing."""
    count = int(np.floor((stop - start) / step + 1e-9)) + 1
    return start + step * np.arange(max(count, 0), dtype=np.float64)


class CoarseScanner:
    """
    Finds an approximate fundamental on a fixed low-resolution grid.

    Magnitudes are normalized by the largest value of the pass. A grid point
    is a candidate when its normalized magnitude exceeds ``peak_threshold``
    and strictly exceeds both neighbours; the first and last grid points are
    never candidates. The strongest candidate wins, and among equal
    candidates the lowest frequency (first found) is kept.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        min_hz: float = COARSE_MIN_HZ,
        max_hz: float = COARSE_MAX_HZ,
        step_hz: float = COARSE_STEP_HZ,
        peak_threshold: float = PEAK_THRESHOLD,
    ):
        """
        Initialize coarse scanner.

        Args:
            sample_rate: Audio sample rate in Hz
            min_hz: Lowest grid frequency
            max_hz: Highest grid frequency
            step_hz: Grid spacing
            peak_threshold: Normalized magnitude a peak must exceed
        """
        self.sample_rate = sample_rate
        self.peak_threshold = peak_threshold
        self._freqs = frequency_grid(min_hz, max_hz, step_hz)
        self._mags = np.zeros(len(self._freqs), dtype=np.float64)

    @property
    def frequencies(self) -> np.ndarray:
        """Grid frequencies (read-only view)."""
        view = self._freqs.view()
        view.flags.writeable = False
        return view

    def _measure(self, samples: np.ndarray) -> float:
        """Fill the magnitude buffer; return the pass maximum."""
        for i, freq in enumerate(self._freqs):
            self._mags[i] = goertzel_magnitude(samples, freq, self.sample_rate)
        return float(np.max(self._mags)) if len(self._mags) else 0.0

    def spectrum(self, samples: np.ndarray) -> list[MagnitudeSample]:
        """Normalized magnitudes for every grid point (all zero for silence)."""
        max_mag = self._measure(samples)
        scale = 1.0 / max_mag if max_mag > 0 else 0.0
        return [
            MagnitudeSample(float(f), float(m * scale))
            for f, m in zip(self._freqs, self._mags)
        ]

    def scan(self, samples: np.ndarray) -> float | None:
        """
        Estimate the fundamental of a conditioned frame.

        Args:
            samples: Conditioned frame

        Returns:
            Grid frequency of the best peak, or None if no grid point
            qualifies (flat, silent or sub-threshold spectrum)
        """
        max_mag = self._measure(samples)
        if not max_mag > 0 or not np.isfinite(max_mag):
            logger.debug("Coarse scan: no energy in range")
            return None

        norm = self._mags / max_mag
        best_freq = None
        best_mag = 0.0
        for i in range(1, len(norm) - 1):
            mag = norm[i]
            if mag > self.peak_threshold and mag > norm[i - 1] and mag > norm[i + 1]:
                if best_freq is None or mag > best_mag:
                    best_freq = float(self._freqs[i])
                    best_mag = mag

        if best_freq is None:
            logger.debug("Coarse scan: no peak above threshold")
        else:
            logger.debug(f"Coarse scan: peak at {best_freq:.1f} Hz ({best_mag:.2f})")
        return best_freq


class FineScanner:
    """
    Refines a coarse estimate by sweeping ``f0 +/- range_hz`` at ``step_hz``.

    Raw magnitudes are compared directly since only one pass is involved.
    With ``interpolate`` on, the winning point is refined by a parabola
    through it and its two neighbours, which recovers sub-step accuracy
    (a 1 Hz step alone is worth ~20 cents at the low E string).
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        range_hz: float = FINE_RANGE_HZ,
        step_hz: float = FINE_STEP_HZ,
        interpolate: bool = True,
    ):
        """
        Initialize fine scanner.

        Args:
            sample_rate: Audio sample rate in Hz
            range_hz: Half-width of the search window
            step_hz: Grid spacing
            interpolate: Apply parabolic interpolation around the peak
        """
        self.sample_rate = sample_rate
        self.range_hz = range_hz
        self.step_hz = step_hz
        self.interpolate = interpolate

        # Offsets are fixed, only the centre moves
        self._offsets = frequency_grid(-range_hz, range_hz, step_hz)
        self._mags = np.zeros(len(self._offsets), dtype=np.float64)

    def _grid(self, f0: float) -> np.ndarray:
        freqs = f0 + self._offsets
        return freqs[freqs > 0]

    def spectrum(self, samples: np.ndarray, f0: float) -> list[MagnitudeSample]:
        """Raw magnitudes around ``f0``."""
        return [
            MagnitudeSample(float(f), goertzel_magnitude(samples, f, self.sample_rate))
            for f in self._grid(f0)
        ]

    def scan(self, samples: np.ndarray, f0: float) -> float:
        """
        Find the strongest frequency near ``f0``.

        Args:
            samples: Conditioned frame
            f0: Coarse estimate in Hz

        Returns:
            Frequency of the highest magnitude (first found on ties)
        """
        freqs = self._grid(f0)
        if len(freqs) == 0:
            return f0

        mags = self._mags[: len(freqs)]
        for i, freq in enumerate(freqs):
            mags[i] = goertzel_magnitude(samples, freq, self.sample_rate)

        best = int(np.argmax(mags))
        freq = float(freqs[best])

        if self.interpolate and 0 < best < len(freqs) - 1:
            y1, y2, y3 = mags[best - 1], mags[best], mags[best + 1]
            denom = y1 - 2 * y2 + y3
            if abs(denom) > 1e-12:
                delta = 0.5 * (y1 - y3) / denom
                freq += delta * self.step_hz

        logger.debug(f"Fine scan: {f0:.1f} Hz -> {freq:.2f} Hz")
        return freq
