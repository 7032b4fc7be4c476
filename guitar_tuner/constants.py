"""
Audio and detection defaults for the guitar tuner.

Every tunable number of the pipeline lives here so the stages never carry
magic numbers of their own. ``TunerConfig`` gathers these into one object
that can be overridden at start-up.
"""

# Audio
SAMPLE_RATE = 44100  # Hz
FRAME_LENGTH = 4096  # samples per analysis frame (~93 ms at 44.1 kHz)
FULL_SCALE_24BIT = 2**23 - 1  # 24-bit samples carried in 32-bit words

# Pitch reference
A4_REFERENCE = 440.0
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Preprocessor
PRE_EMPHASIS = 0.85
MIN_RMS = 0.002

# Coarse scan
COARSE_MIN_HZ = 50.0
COARSE_MAX_HZ = 350.0
COARSE_STEP_HZ = 5.0
PEAK_THRESHOLD = 0.5  # fraction of the pass maximum

# Fine scan
FINE_RANGE_HZ = 10.0  # +/- around the coarse estimate
FINE_STEP_HZ = 1.0

# Note matching
MATCH_THRESHOLD_CENTS = 100.0

# Debounce
HISTORY_SIZE = 4
QUORUM = 3
NO_MATCH = -1
IN_TUNE_CENTS = 10.0
