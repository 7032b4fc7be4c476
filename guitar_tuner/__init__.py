"""
guitar_tuner - Guitar string tuner with two-pass Goertzel pitch detection
"""

from .config import TunerConfig, load_config, save_config
from .constants import A4_REFERENCE, FRAME_LENGTH, NOTE_NAMES, SAMPLE_RATE
from .debouncer import Debouncer, Guidance, TuningDirective
from .errors import AudioSourceError, ConfigError, EndOfStream, GuitarTunerError
from .goertzel import goertzel_magnitude
from .matcher import MatchResult, NoteMatcher
from .notes import STANDARD_TUNING, GuitarNote
from .preprocessor import ConditionedFrame, Preprocessor, normalize_samples
from .scanner import CoarseScanner, FineScanner, MagnitudeSample
from .tuner import GuitarTuner, PipelineStage, TunerResult

__version__ = "0.1.0"
__all__ = [
    "GuitarTuner",
    "TunerResult",
    "PipelineStage",
    "TunerConfig",
    "load_config",
    "save_config",
    "Preprocessor",
    "ConditionedFrame",
    "normalize_samples",
    "goertzel_magnitude",
    "CoarseScanner",
    "FineScanner",
    "MagnitudeSample",
    "NoteMatcher",
    "MatchResult",
    "Debouncer",
    "Guidance",
    "TuningDirective",
    "GuitarNote",
    "STANDARD_TUNING",
    "SAMPLE_RATE",
    "FRAME_LENGTH",
    "A4_REFERENCE",
    "NOTE_NAMES",
    "GuitarTunerError",
    "ConfigError",
    "AudioSourceError",
    "EndOfStream",
]
