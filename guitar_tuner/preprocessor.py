"""
Frame conditioning: Hann window, pre-emphasis and an RMS silence gate.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.signal import lfilter
from scipy.signal.windows import hann

from .constants import FRAME_LENGTH, FULL_SCALE_24BIT, MIN_RMS, PRE_EMPHASIS

logger = logging.getLogger(__name__)


@dataclass
class ConditionedFrame:
    """A windowed, pre-emphasized frame that passed the silence gate."""

    samples: np.ndarray
    rms: float


def normalize_samples(raw: np.ndarray, full_scale: float = FULL_SCALE_24BIT) -> np.ndarray:
    """
    Convert raw audio to float64 samples in [-1.0, 1.0].

    Integer input is divided by ``full_scale`` (e.g. 2**23 - 1 for 24-bit
    audio carried in 32-bit words) and clipped. Float input is assumed to be
    normalized already. Multi-channel input keeps the first channel only.

    Args:
        raw: Audio samples, shape (n,) or (n, channels)
        full_scale: Integer value that maps to amplitude 1.0

    Returns:
        One-dimensional float64 array
    """
    raw = np.asarray(raw)
    if raw.ndim == 2:
        raw = raw[:, 0]
    elif raw.ndim != 1:
        raise ValueError(f"Expected 1-D or 2-D audio, got shape {raw.shape}")

    if np.issubdtype(raw.dtype, np.integer):
        samples = raw.astype(np.float64) / full_scale
        return np.clip(samples, -1.0, 1.0)
    return raw.astype(np.float64, copy=False)


class Preprocessor:
    """
    Conditions one audio frame for pitch analysis.

    Steps, in order:
    1. Hann window ``0.5 * (1 - cos(2*pi*i / (L-1)))``
    2. Pre-emphasis ``y[i] = x[i] - alpha * x[i-1]`` with ``x[-1] = 0``
    3. RMS of the filtered frame, compared against ``min_rms``

    The window and the working buffer are allocated once. ``process`` returns
    a copy, so a ConditionedFrame never aliases the working buffer.
    """

    def __init__(
        self,
        frame_length: int = FRAME_LENGTH,
        pre_emphasis: float = PRE_EMPHASIS,
        min_rms: float = MIN_RMS,
    ):
        """
        Initialize preprocessor.

        Args:
            frame_length: Expected number of samples per frame
            pre_emphasis: Pre-emphasis coefficient alpha
            min_rms: Silence threshold on the filtered frame's RMS
        """
        self.frame_length = frame_length
        self.pre_emphasis = pre_emphasis
        self.min_rms = min_rms

        self._window = hann(frame_length, sym=True)
        self._buffer = np.zeros(frame_length, dtype=np.float64)
        self._b = np.array([1.0, -pre_emphasis])
        self._a = np.array([1.0])

    def condition(self, samples: np.ndarray) -> tuple[np.ndarray, float]:
        """
        Window and filter ``samples`` without gating.

        Returns:
            (filtered samples, RMS) - the array is the internal working
            buffer and is overwritten by the next call
        """
        samples = np.asarray(samples, dtype=np.float64)
        if samples.shape != (self.frame_length,):
            raise ValueError(
                f"Expected a frame of {self.frame_length} samples, got shape {samples.shape}"
            )

        np.multiply(samples, self._window, out=self._buffer)
        self._buffer[:] = lfilter(self._b, self._a, self._buffer)
        rms = float(np.sqrt(np.mean(self._buffer**2)))
        return self._buffer, rms

    def process(self, samples: np.ndarray) -> tuple[ConditionedFrame | None, float]:
        """
        Condition a frame and apply the silence gate.

        Args:
            samples: Normalized frame of ``frame_length`` samples

        Returns:
            (ConditionedFrame or None if silent, RMS of the filtered frame)
        """
        filtered, rms = self.condition(samples)
        if rms < self.min_rms:
            logger.debug(f"Silent frame (rms={rms:.5f} < {self.min_rms})")
            return None, rms
        return ConditionedFrame(samples=filtered.copy(), rms=rms), rms
