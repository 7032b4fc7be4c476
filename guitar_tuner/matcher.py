"""
Nearest reference note for a measured frequency.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .constants import MATCH_THRESHOLD_CENTS
from .notes import STANDARD_TUNING, GuitarNote, frequency_to_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """A frequency matched to a reference note."""

    note_index: int
    note: GuitarNote
    frequency: float  # Measured frequency in Hz
    cents: float  # Signed deviation from the note, |cents| <= threshold


class NoteMatcher:
    """
    Maps a frequency to the closest note of a fixed reference set.

    Readings further than ``threshold_cents`` from every note (harmonics,
    noise, badly detuned strings) are rejected.
    """

    def __init__(
        self,
        notes: tuple[GuitarNote, ...] = STANDARD_TUNING,
        threshold_cents: float = MATCH_THRESHOLD_CENTS,
    ):
        self.notes = tuple(notes)
        self.threshold_cents = threshold_cents
        self._targets = np.array([n.frequency for n in self.notes], dtype=np.float64)

    def match(self, frequency: float) -> MatchResult | None:
        """
        Find the nearest note to ``frequency``.

        Args:
            frequency: Measured frequency in Hz

        Returns:
            MatchResult, or None if no note is within the threshold
        """
        if not frequency > 0 or not np.isfinite(frequency):
            return None

        deviations = 1200.0 * np.log2(frequency / self._targets)
        # argmin keeps the first note on an exact tie
        index = int(np.argmin(np.abs(deviations)))
        cents = float(deviations[index])

        if abs(cents) > self.threshold_cents:
            logger.debug(
                f"No note within {self.threshold_cents:.0f} cents of {frequency:.2f} Hz "
                f"({frequency_to_name(frequency)}; nearest string {self.notes[index].name}, "
                f"{cents:+.1f})"
            )
            return None

        return MatchResult(
            note_index=index,
            note=self.notes[index],
            frequency=float(frequency),
            cents=cents,
        )
