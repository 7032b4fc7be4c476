"""Tests for the coarse and fine frequency scanners."""

import numpy as np
import pytest

from guitar_tuner import scanner
from guitar_tuner.preprocessor import Preprocessor
from guitar_tuner.scanner import CoarseScanner, FineScanner, frequency_grid

from .signals import generate_sine_wave


def conditioned(frequency: float) -> np.ndarray:
    """Conditioned frame of a pure tone."""
    frame, _ = Preprocessor().process(generate_sine_wave(frequency))
    assert frame is not None
    return frame.samples


def fake_magnitudes(monkeypatch, peaks: dict[float, float]):
    """Replace the Goertzel call with a lookup; unlisted frequencies get 0.01."""

    def fake(samples, frequency, sample_rate):
        return peaks.get(round(float(frequency), 3), 0.01)

    monkeypatch.setattr(scanner, "goertzel_magnitude", fake)


class TestFrequencyGrid:
    def test_inclusive_bounds(self):
        grid = frequency_grid(50.0, 350.0, 5.0)
        assert len(grid) == 61
        assert grid[0] == 50.0
        assert grid[-1] == 350.0

    def test_symmetric_offsets(self):
        grid = frequency_grid(-10.0, 10.0, 1.0)
        assert len(grid) == 21
        assert 0.0 in grid


class TestCoarseScanner:
    """Coarse grid peak selection."""

    def setup_method(self):
        self.coarse = CoarseScanner()

    def test_pure_tone(self):
        assert self.coarse.scan(conditioned(110.0)) == 110.0

    def test_off_grid_tone_picks_nearest_point(self):
        assert self.coarse.scan(conditioned(82.41)) == 80.0
        assert self.coarse.scan(conditioned(329.63)) == 330.0

    def test_all_zero_frame(self):
        """Silent frame has no maximum to normalize by."""
        assert self.coarse.scan(np.zeros(4096)) is None

    def test_spectrum_normalized(self):
        spectrum = self.coarse.spectrum(conditioned(196.0))
        assert len(spectrum) == 61
        assert max(s.magnitude for s in spectrum) == pytest.approx(1.0)
        best = max(spectrum, key=lambda s: s.magnitude)
        assert best.frequency == 195.0

    def test_spectrum_of_silence(self):
        spectrum = self.coarse.spectrum(np.zeros(4096))
        assert all(s.magnitude == 0.0 for s in spectrum)

    def test_equal_peaks_keep_first(self, monkeypatch):
        """Equal candidates: the lower (first scanned) frequency wins."""
        fake_magnitudes(monkeypatch, {100.0: 1.0, 200.0: 1.0})
        assert self.coarse.scan(np.zeros(16)) == 100.0

    def test_strongest_candidate_wins(self, monkeypatch):
        fake_magnitudes(monkeypatch, {100.0: 0.7, 200.0: 1.0})
        assert self.coarse.scan(np.zeros(16)) == 200.0

    def test_threshold_is_strict(self, monkeypatch):
        """A peak at exactly half the maximum is not a candidate."""
        fake_magnitudes(monkeypatch, {100.0: 0.5, 200.0: 1.0, 205.0: 1.0})
        # 200 and 205 form a plateau (not strict maxima), 100 sits at 0.5
        assert self.coarse.scan(np.zeros(16)) is None

    def test_edges_are_not_candidates(self, monkeypatch):
        fake_magnitudes(monkeypatch, {50.0: 1.0, 350.0: 0.9})
        assert self.coarse.scan(np.zeros(16)) is None

    def test_sub_threshold_local_maximum_ignored(self, monkeypatch):
        fake_magnitudes(monkeypatch, {50.0: 1.0, 150.0: 0.4, 250.0: 0.6})
        assert self.coarse.scan(np.zeros(16)) == 250.0


class TestFineScanner:
    """Fine search around the coarse estimate."""

    def test_refines_to_true_frequency(self):
        fine = FineScanner()
        assert fine.scan(conditioned(112.3), 110.0) == pytest.approx(112.3, abs=0.1)

    def test_without_interpolation_returns_grid_point(self):
        fine = FineScanner(interpolate=False)
        assert fine.scan(conditioned(112.3), 110.0) == 112.0

    def test_low_e_accuracy(self):
        """Sub-step accuracy where 1 Hz is ~20 cents."""
        fine = FineScanner()
        assert fine.scan(conditioned(82.41), 80.0) == pytest.approx(82.41, abs=0.05)

    def test_always_returns_value(self):
        fine = FineScanner()
        result = fine.scan(np.zeros(4096), 150.0)
        assert 140.0 <= result <= 160.0

    def test_grid_stays_positive(self):
        fine = FineScanner()
        spectrum = fine.spectrum(conditioned(110.0), 5.0)
        assert all(s.frequency > 0 for s in spectrum)
        assert fine.scan(conditioned(110.0), 5.0) > 0

    def test_spectrum_peak(self):
        fine = FineScanner()
        spectrum = fine.spectrum(conditioned(146.83), 145.0)
        assert len(spectrum) == 21
        best = max(spectrum, key=lambda s: s.magnitude)
        assert best.frequency == 147.0
