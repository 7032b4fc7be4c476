"""
Single-bin DFT magnitude via the Goertzel recursion.

Only a few dozen frequencies are tested per frame, so evaluating them one at
a time is cheaper than a full spectrum and lets the grid sit on arbitrary
(non bin-aligned) frequencies.
"""

import numpy as np
from scipy.signal import lfilter


def goertzel_magnitude(samples: np.ndarray, frequency: float, sample_rate: float) -> float:
    """
    Magnitude of ``samples`` at ``frequency``.

    Runs the recursion ``s[n] = x[n] + coeff * s[n-1] - s[n-2]`` with
    ``coeff = 2 * cos(2*pi*f / sample_rate)`` and combines the final two
    states into the DFT term at ``f``.

    Args:
        samples: Frame of audio samples
        frequency: Frequency to evaluate in Hz
        sample_rate: Sample rate of ``samples`` in Hz

    Returns:
        Non-negative magnitude (unitless, comparable within one frame only)
    """
    if len(samples) == 0:
        return 0.0

    omega = 2.0 * np.pi * frequency / sample_rate
    cosine = np.cos(omega)
    coeff = 2.0 * cosine

    # IIR form of the recursion: 1 / (1 - coeff z^-1 + z^-2)
    state = lfilter([1.0], [1.0, -coeff, 1.0], samples)
    s_prev = state[-1]
    s_prev2 = state[-2] if len(state) > 1 else 0.0

    real = s_prev - s_prev2 * cosine
    imag = s_prev2 * np.sin(omega)
    return float(np.sqrt(real * real + imag * imag))
