"""
Temporal debouncing of note matches.

A reading is only reported once the same note has been matched in a quorum
of the most recent frames, which filters pluck transients and one-frame
mis-detections.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from .constants import HISTORY_SIZE, IN_TUNE_CENTS, NO_MATCH, QUORUM
from .matcher import MatchResult
from .notes import GuitarNote, string_number

logger = logging.getLogger(__name__)


class Guidance(Enum):
    """Which way the string has to go."""

    TOO_LOW = "too-low"  # Tighten
    TOO_HIGH = "too-high"  # Loosen
    IN_TUNE = "in-tune"


def classify(cents: float, deadband: float = IN_TUNE_CENTS) -> Guidance:
    """Guidance for a deviation; ``[-deadband, deadband]`` is in tune."""
    if cents < -deadband:
        return Guidance.TOO_LOW
    if cents > deadband:
        return Guidance.TOO_HIGH
    return Guidance.IN_TUNE


@dataclass(frozen=True)
class TuningDirective:
    """A stable tuning reading for display or actuation."""

    note_index: int
    note: GuitarNote
    frequency: float
    cents: float
    guidance: Guidance

    @property
    def string_number(self) -> int:
        """Guitar string number (1 = high E in standard tuning)."""
        return string_number(self.note_index)


class Debouncer:
    """
    Majority vote over the last ``history_size`` match indices.

    Every pass that reaches matching pushes its note index, or ``NO_MATCH``
    (-1), evicting the oldest entry. A directive is emitted when the current
    index occurs at least ``quorum`` times in the window. The history starts
    filled with ``NO_MATCH``.
    """

    def __init__(
        self,
        history_size: int = HISTORY_SIZE,
        quorum: int = QUORUM,
        in_tune_cents: float = IN_TUNE_CENTS,
    ):
        """
        Initialize debouncer.

        Args:
            history_size: Number of recent passes kept
            quorum: Occurrences of the current index needed to emit
            in_tune_cents: Deadband for the in-tune guidance
        """
        self.history_size = history_size
        self.quorum = quorum
        self.in_tune_cents = in_tune_cents
        self._history: deque[int] = deque([NO_MATCH] * history_size, maxlen=history_size)

    @property
    def history(self) -> tuple[int, ...]:
        """Recent indices, oldest first."""
        return tuple(self._history)

    def reset(self):
        """Forget all previous detections."""
        self._history.extend([NO_MATCH] * self.history_size)

    def update(self, match: MatchResult | None) -> TuningDirective | None:
        """
        Record one pass and decide whether the reading is stable.

        Args:
            match: Result of note matching for this pass, None for no match

        Returns:
            TuningDirective when the current note reaches the quorum,
            otherwise None
        """
        index = NO_MATCH if match is None else match.note_index
        self._history.append(index)

        if match is None:
            return None

        count = self._history.count(index)
        if count < self.quorum:
            logger.debug(f"{match.note.name}: {count}/{self.quorum} in {list(self._history)}")
            return None

        return TuningDirective(
            note_index=match.note_index,
            note=match.note,
            frequency=match.frequency,
            cents=match.cents,
            guidance=classify(match.cents, self.in_tune_cents),
        )
