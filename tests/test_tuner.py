"""
Tests for the GuitarTuner pipeline using synthetic signals.

These tests generate sine waves at the reference string frequencies and
verify note identity, cents accuracy, stage reporting and debouncing.
"""

import numpy as np
import pytest

from guitar_tuner import FRAME_LENGTH, STANDARD_TUNING
from guitar_tuner.config import TunerConfig
from guitar_tuner.debouncer import Guidance
from guitar_tuner.sinks import CallbackSink
from guitar_tuner.sources import ArraySource
from guitar_tuner.tuner import GuitarTuner, PipelineStage

from .signals import cents_offset, generate_sine_wave


class TestPitchAccuracy:
    """Single-pass note matching on pure tones."""

    @pytest.mark.parametrize("index", range(len(STANDARD_TUNING)))
    def test_reference_frequency(self, index):
        note = STANDARD_TUNING[index]
        result = GuitarTuner().analyze(generate_sine_wave(note.frequency))

        assert result.match is not None, f"Should match {note.name}"
        assert result.match.note_index == index
        assert abs(result.match.cents) <= 2.0, (
            f"{note.name}: expected ~0 cents, got {result.match.cents:.2f}"
        )

    def test_sharp_string(self):
        freq = cents_offset(110.0, 30.0)
        result = GuitarTuner().analyze(generate_sine_wave(freq))
        assert result.match.note.name == "A2"
        assert result.match.cents == pytest.approx(30.0, abs=2.0)

    def test_flat_string(self):
        freq = cents_offset(246.94, -45.0)
        result = GuitarTuner().analyze(generate_sine_wave(freq))
        assert result.match.note.name == "B3"
        assert result.match.cents == pytest.approx(-45.0, abs=2.0)


class TestPipelineStages:
    """Where each kind of frame stops."""

    def setup_method(self):
        self.tuner = GuitarTuner()

    def test_silent_frame(self):
        result = self.tuner.analyze(generate_sine_wave(110.0, amplitude=0.001))
        assert result.stage == PipelineStage.SILENT
        assert result.coarse_frequency is None
        assert result.match is None
        assert not result.valid
        # Never reached the debouncer
        assert self.tuner.history == (-1, -1, -1, -1)

    def test_no_peak(self):
        tuner = GuitarTuner(TunerConfig(peak_threshold=1.0))
        result = tuner.analyze(generate_sine_wave(110.0))
        assert result.stage == PipelineStage.NO_PEAK
        assert result.fine_frequency is None
        assert tuner.history == (-1, -1, -1, -1)

    def test_no_match_pushes_sentinel(self):
        a2 = generate_sine_wave(110.0)
        self.tuner.analyze(a2)
        self.tuner.analyze(a2)

        midpoint = float(np.sqrt(82.41 * 110.0))
        result = self.tuner.analyze(generate_sine_wave(midpoint))
        assert result.stage == PipelineStage.NO_MATCH
        assert result.fine_frequency == pytest.approx(midpoint, abs=0.2)
        assert self.tuner.history == (-1, 1, 1, -1)

    def test_unstable_then_directive(self):
        frame = generate_sine_wave(196.0)
        stages = [self.tuner.analyze(frame).stage for _ in range(4)]
        assert stages == [
            PipelineStage.UNSTABLE,
            PipelineStage.UNSTABLE,
            PipelineStage.DIRECTIVE,
            PipelineStage.DIRECTIVE,
        ]

    def test_directive_guidance(self):
        frame = generate_sine_wave(cents_offset(146.83, -40.0))
        for _ in range(2):
            assert self.tuner.process(frame) is None
        directive = self.tuner.process(frame)
        assert directive.note.name == "D3"
        assert directive.guidance == Guidance.TOO_LOW

    def test_in_tune_guidance(self):
        frame = generate_sine_wave(329.63)
        for _ in range(2):
            self.tuner.process(frame)
        assert self.tuner.process(frame).guidance == Guidance.IN_TUNE

    def test_reset(self):
        frame = generate_sine_wave(110.0)
        for _ in range(3):
            self.tuner.process(frame)
        self.tuner.reset()
        assert self.tuner.history == (-1, -1, -1, -1)
        assert self.tuner.process(frame) is None


class TestDeterminism:
    def test_identical_input_identical_output(self):
        """Two engines with independent histories agree pass for pass."""
        frame = generate_sine_wave(cents_offset(82.41, 25.0))
        first = GuitarTuner()
        second = GuitarTuner()

        for _ in range(3):
            a = first.analyze(frame)
            b = second.analyze(frame)
            assert a.match == b.match
            assert a.stage == b.stage

        assert a.directive is not None
        assert a.directive.guidance == b.directive.guidance == Guidance.TOO_HIGH

    def test_instances_do_not_share_history(self):
        first = GuitarTuner()
        second = GuitarTuner()
        first.analyze(generate_sine_wave(110.0))
        assert second.history == (-1, -1, -1, -1)


class TestRunLoop:
    """Frame loop with a source and a sink."""

    def test_emits_to_sink(self):
        received = []
        signal = generate_sine_wave(110.0, FRAME_LENGTH * 5)
        emitted = GuitarTuner().run(ArraySource(signal), CallbackSink(received.append))

        assert emitted == 3
        assert len(received) == 3
        assert all(d.note.name == "A2" for d in received)

    def test_failed_frame_is_skipped(self):
        """A lost frame neither counts as a pass nor disturbs the history."""
        received = []
        tuner = GuitarTuner()
        signal = generate_sine_wave(110.0, FRAME_LENGTH * 6)
        source = ArraySource(signal, fail_at={1})

        emitted = tuner.run(source, CallbackSink(received.append))

        # Reads 0, 2, 3, 4, 5 are processed; directives from the third on
        assert emitted == 3
        assert tuner.history == (1, 1, 1, 1)

    def test_step_returns_none_on_failure(self):
        tuner = GuitarTuner()
        source = ArraySource(generate_sine_wave(110.0, FRAME_LENGTH * 2), fail_at={0})
        assert tuner.step(source) is None
        assert tuner.history == (-1, -1, -1, -1)
        assert tuner.step(source).stage == PipelineStage.UNSTABLE

    def test_max_frames(self):
        source = ArraySource(generate_sine_wave(110.0, FRAME_LENGTH), loop=True)
        emitted = GuitarTuner().run(source, CallbackSink(lambda d: None), max_frames=10)
        assert emitted == 8

    def test_silence_emits_nothing(self):
        source = ArraySource(np.zeros(FRAME_LENGTH * 4))
        assert GuitarTuner().run(source, CallbackSink(lambda d: None)) == 0
