"""
Reference pitches for a six-string guitar in standard tuning.
"""

from typing import NamedTuple

import numpy as np

from .constants import A4_REFERENCE, NOTE_NAMES


class GuitarNote(NamedTuple):
    """A reference string pitch."""
    name: str
    frequency: float


# Index 0 is the low E (string 6), index 5 the high E (string 1).
STANDARD_TUNING: tuple[GuitarNote, ...] = (
    GuitarNote("E2", 82.41),
    GuitarNote("A2", 110.00),
    GuitarNote("D3", 146.83),
    GuitarNote("G3", 196.00),
    GuitarNote("B3", 246.94),
    GuitarNote("E4", 329.63),
)


def cents_between(frequency: float, target: float) -> float:
    """
    Signed distance from ``target`` to ``frequency`` in cents.

    Args:
        frequency: Measured frequency in Hz
        target: Reference frequency in Hz

    Returns:
        ``1200 * log2(frequency / target)``

    Raises:
        ValueError: If either frequency is not positive
    """
    if frequency <= 0 or target <= 0:
        raise ValueError(f"Frequencies must be positive: {frequency}, {target}")
    return float(1200.0 * np.log2(frequency / target))


def string_number(index: int, string_count: int = len(STANDARD_TUNING)) -> int:
    """String number as printed on the guitar (1 = thinnest)."""
    return string_count - index


def frequency_to_name(frequency: float, reference: float = A4_REFERENCE) -> str:
    """Nearest equal-tempered note name with octave, e.g. ``"A2"``."""
    if frequency <= 0:
        return "---"
    note = int(round(12.0 * np.log2(frequency / reference) + 69))
    return f"{NOTE_NAMES[note % 12]}{note // 12 - 1}"
