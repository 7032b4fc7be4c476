"""
Guitar tuning engine.

Runs one audio frame at a time through the pitch pipeline:

    Preprocessor -> CoarseScanner -> FineScanner -> NoteMatcher -> Debouncer

Each stage can end the pass early (silence, no peak, no matching note,
unstable reading); these are normal outcomes reported through
``TunerResult.stage``, not errors.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .config import TunerConfig
from .debouncer import Debouncer, TuningDirective
from .errors import AudioSourceError, EndOfStream
from .matcher import MatchResult, NoteMatcher
from .preprocessor import Preprocessor
from .scanner import CoarseScanner, FineScanner
from .sinks import DirectiveSink
from .sources import AudioSource

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Where a pass ended."""

    SILENT = "silent"  # RMS below threshold
    NO_PEAK = "no_peak"  # Coarse scan found nothing
    NO_MATCH = "no_match"  # No reference note close enough
    UNSTABLE = "unstable"  # Match not yet confirmed by the history
    DIRECTIVE = "directive"  # Stable reading emitted


@dataclass
class TunerResult:
    """Outcome of one pipeline pass."""

    stage: PipelineStage
    rms: float = 0.0
    coarse_frequency: float | None = None
    fine_frequency: float | None = None
    match: MatchResult | None = None
    directive: TuningDirective | None = None

    @property
    def valid(self) -> bool:
        """True if a directive was emitted."""
        return self.directive is not None


class GuitarTuner:
    """
    Estimates string pitch and emits stable tuning directives.

    The engine owns all stage state, including the debounce history, so
    separate instances never share anything.
    """

    def __init__(self, config: TunerConfig | None = None):
        """
        Initialize tuner.

        Args:
            config: Pipeline settings (defaults if None)
        """
        self.config = config or TunerConfig()
        cfg = self.config

        self._preprocessor = Preprocessor(
            frame_length=cfg.frame_length,
            pre_emphasis=cfg.pre_emphasis,
            min_rms=cfg.min_rms,
        )
        self._coarse = CoarseScanner(
            sample_rate=cfg.sample_rate,
            min_hz=cfg.coarse_min_hz,
            max_hz=cfg.coarse_max_hz,
            step_hz=cfg.coarse_step_hz,
            peak_threshold=cfg.peak_threshold,
        )
        self._fine = FineScanner(
            sample_rate=cfg.sample_rate,
            range_hz=cfg.fine_range_hz,
            step_hz=cfg.fine_step_hz,
            interpolate=cfg.fine_interpolation,
        )
        self._matcher = NoteMatcher(
            notes=cfg.notes,
            threshold_cents=cfg.match_threshold_cents,
        )
        self._debouncer = Debouncer(
            history_size=cfg.history_size,
            quorum=cfg.quorum,
            in_tune_cents=cfg.in_tune_cents,
        )

    @property
    def history(self) -> tuple[int, ...]:
        """Current debounce history, oldest first."""
        return self._debouncer.history

    def reset(self):
        """Clear the debounce history."""
        self._debouncer.reset()

    def analyze(self, samples: np.ndarray) -> TunerResult:
        """
        Run one frame through the whole pipeline.

        Args:
            samples: Normalized frame of ``config.frame_length`` samples

        Returns:
            TunerResult describing how far the pass got
        """
        frame, rms = self._preprocessor.process(samples)
        if frame is None:
            return TunerResult(stage=PipelineStage.SILENT, rms=rms)

        coarse = self._coarse.scan(frame.samples)
        if coarse is None:
            return TunerResult(stage=PipelineStage.NO_PEAK, rms=rms)

        fine = self._fine.scan(frame.samples, coarse)
        match = self._matcher.match(fine)
        directive = self._debouncer.update(match)

        if match is None:
            stage = PipelineStage.NO_MATCH
        elif directive is None:
            stage = PipelineStage.UNSTABLE
        else:
            stage = PipelineStage.DIRECTIVE

        logger.debug(f"Pass ended at {stage.value}: coarse={coarse:.1f} Hz, fine={fine:.2f} Hz")
        return TunerResult(
            stage=stage,
            rms=rms,
            coarse_frequency=coarse,
            fine_frequency=fine,
            match=match,
            directive=directive,
        )

    def process(self, samples: np.ndarray) -> TuningDirective | None:
        """Run one frame and return the directive, if any."""
        return self.analyze(samples).directive

    def step(self, source: AudioSource, sink: DirectiveSink | None = None) -> TunerResult | None:
        """
        Read one frame from ``source``, process it and hand any directive to ``sink``.

        A frame the source fails to deliver is skipped without touching the
        debounce history.

        Returns:
            TunerResult, or None if the frame was skipped

        Raises:
            EndOfStream: If the source has no more frames
        """
        try:
            samples = source.read()
        except EndOfStream:
            raise
        except AudioSourceError as e:
            logger.warning(f"Skipping frame: {e}")
            return None

        result = self.analyze(samples)
        directive = result.directive
        if directive is not None:
            logger.info(
                f"{directive.note.name}: {directive.frequency:.2f} Hz, "
                f"{directive.cents:+.1f} cents ({directive.guidance.value})"
            )
            if sink is not None:
                sink.emit(directive)
        return result

    def run(
        self,
        source: AudioSource,
        sink: DirectiveSink,
        max_frames: int | None = None,
    ) -> int:
        """
        Process frames from ``source`` until it ends or ``max_frames`` reads.

        Args:
            source: Audio source matching ``config.sample_rate``
            sink: Receiver of emitted directives
            max_frames: Stop after this many reads (None = until end of stream)

        Returns:
            Number of directives emitted
        """
        if source.sample_rate != self.config.sample_rate:
            logger.warning(
                f"Source rate {source.sample_rate} Hz differs from configured "
                f"{self.config.sample_rate} Hz"
            )

        emitted = 0
        reads = 0
        while max_frames is None or reads < max_frames:
            reads += 1
            try:
                result = self.step(source, sink)
            except EndOfStream:
                logger.info("Audio source finished")
                break
            if result is not None and result.valid:
                emitted += 1

        return emitted
