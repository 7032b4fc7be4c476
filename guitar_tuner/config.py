"""
Run-time configuration for the tuning pipeline.

A ``TunerConfig`` is fixed for the lifetime of a ``GuitarTuner``; to change
settings build a new engine. Values can be loaded from and saved to a JSON
file mapping option names to values, e.g.::

    {
        "sample_rate": 48000,
        "frame_length": 4096,
        "pre_emphasis": 0.9
    }
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .constants import (
    COARSE_MAX_HZ,
    COARSE_MIN_HZ,
    COARSE_STEP_HZ,
    FINE_RANGE_HZ,
    FINE_STEP_HZ,
    FRAME_LENGTH,
    FULL_SCALE_24BIT,
    HISTORY_SIZE,
    IN_TUNE_CENTS,
    MATCH_THRESHOLD_CENTS,
    MIN_RMS,
    PEAK_THRESHOLD,
    PRE_EMPHASIS,
    QUORUM,
    SAMPLE_RATE,
)
from .errors import ConfigError
from .notes import STANDARD_TUNING, GuitarNote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunerConfig:
    """
    All recognized tuner options.

    Attributes:
        sample_rate: Audio sample rate in Hz
        frame_length: Samples per analysis frame
        coarse_min_hz: Lowest frequency of the coarse grid
        coarse_max_hz: Highest frequency of the coarse grid
        coarse_step_hz: Coarse grid spacing
        fine_range_hz: Half-width of the fine search around the coarse estimate
        fine_step_hz: Fine grid spacing
        fine_interpolation: Refine the fine peak with a parabolic fit
        pre_emphasis: Pre-emphasis coefficient (alpha)
        min_rms: RMS below which a frame is treated as silence
        peak_threshold: Normalized magnitude a coarse peak must exceed
        match_threshold_cents: Largest accepted distance to a reference note
        history_size: Debounce window length
        quorum: Matches of the current note needed within the window
        in_tune_cents: Half-width of the in-tune deadband
        full_scale: Divisor used to normalize raw integer samples
        notes: Reference pitches, lowest string first
    """
    sample_rate: int = SAMPLE_RATE
    frame_length: int = FRAME_LENGTH
    coarse_min_hz: float = COARSE_MIN_HZ
    coarse_max_hz: float = COARSE_MAX_HZ
    coarse_step_hz: float = COARSE_STEP_HZ
    fine_range_hz: float = FINE_RANGE_HZ
    fine_step_hz: float = FINE_STEP_HZ
    fine_interpolation: bool = True
    pre_emphasis: float = PRE_EMPHASIS
    min_rms: float = MIN_RMS
    peak_threshold: float = PEAK_THRESHOLD
    match_threshold_cents: float = MATCH_THRESHOLD_CENTS
    history_size: int = HISTORY_SIZE
    quorum: int = QUORUM
    in_tune_cents: float = IN_TUNE_CENTS
    full_scale: float = FULL_SCALE_24BIT
    notes: tuple[GuitarNote, ...] = field(default=STANDARD_TUNING)

    def __post_init__(self):
        # JSON gives lists; keep the reference set immutable
        notes = tuple(GuitarNote(str(name), float(freq)) for name, freq in self.notes)
        object.__setattr__(self, "notes", notes)
        self.validate()

    def validate(self):
        """
        Check option ranges.

        Raises:
            ConfigError: If any option is out of range
        """
        if self.sample_rate <= 0:
            raise ConfigError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.frame_length < 2:
            raise ConfigError(f"frame_length must be at least 2, got {self.frame_length}")
        if self.coarse_step_hz <= 0 or self.fine_step_hz <= 0:
            raise ConfigError("Scan steps must be positive")
        if self.coarse_min_hz <= 0 or self.coarse_min_hz >= self.coarse_max_hz:
            raise ConfigError(
                f"Invalid coarse range {self.coarse_min_hz}-{self.coarse_max_hz} Hz"
            )
        if self.coarse_max_hz >= self.sample_rate / 2:
            raise ConfigError("coarse_max_hz must be below the Nyquist frequency")
        if self.fine_range_hz < 0:
            raise ConfigError(f"fine_range_hz must not be negative, got {self.fine_range_hz}")
        if not 0.0 <= self.pre_emphasis < 1.0:
            raise ConfigError(f"pre_emphasis must be in [0, 1), got {self.pre_emphasis}")
        if self.min_rms < 0 or self.peak_threshold < 0:
            raise ConfigError("Thresholds must not be negative")
        if self.match_threshold_cents < 0 or self.in_tune_cents < 0:
            raise ConfigError("Cents thresholds must not be negative")
        if self.history_size < 1:
            raise ConfigError(f"history_size must be at least 1, got {self.history_size}")
        if not 1 <= self.quorum <= self.history_size:
            raise ConfigError(
                f"quorum must be between 1 and history_size ({self.history_size}), "
                f"got {self.quorum}"
            )
        if self.full_scale <= 0:
            raise ConfigError(f"full_scale must be positive, got {self.full_scale}")
        if not self.notes:
            raise ConfigError("At least one reference note is required")
        if any(note.frequency <= 0 for note in self.notes):
            raise ConfigError("Reference frequencies must be positive")

    def replace(self, **changes) -> "TunerConfig":
        """Return a validated copy with ``changes`` applied."""
        unknown = set(changes) - _option_names()
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        """Plain JSON-compatible dictionary of all options."""
        data = dataclasses.asdict(self)
        data["notes"] = [[note.name, note.frequency] for note in self.notes]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TunerConfig":
        """Build a config from a mapping; missing options take defaults."""
        unknown = set(data) - _option_names()
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Invalid configuration: {e}") from e


def _option_names() -> set[str]:
    return {f.name for f in dataclasses.fields(TunerConfig)}


def load_config(path: str | Path) -> TunerConfig:
    """
    Load a configuration from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        TunerConfig with file values over the defaults

    Raises:
        ConfigError: If the file cannot be read or holds invalid options
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must hold a JSON object")

    config = TunerConfig.from_dict(data)
    logger.info(f"Loaded configuration from {path}")
    return config


def save_config(config: TunerConfig, path: str | Path):
    """Write ``config`` to ``path`` as JSON."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info(f"Saved configuration to {path}")
