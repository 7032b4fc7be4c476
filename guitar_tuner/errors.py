"""
Exceptions raised by the guitar tuner.

Signal-quality conditions (silence, no peak, no matching note, unstable
reading) are ordinary results and never raise.
"""


class GuitarTunerError(Exception):
    """Base class for tuner errors."""


class ConfigError(GuitarTunerError, ValueError):
    """Invalid or unreadable configuration."""


class AudioSourceError(GuitarTunerError):
    """The audio source failed to deliver a frame."""


class EndOfStream(AudioSourceError):
    """The audio source has no more frames."""
