"""
Main application window for guitar tuning.
"""

import logging
import sys

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from ..config import TunerConfig
from ..debouncer import Guidance, TuningDirective
from ..errors import AudioSourceError, EndOfStream
from ..sinks import CallbackSink
from ..sources import AudioSource, SoundDeviceSource
from ..tuner import GuitarTuner
from .cents_meter import CentsMeter, zone_color
from .styles import MAIN_WINDOW_STYLE

logger = logging.getLogger(__name__)

_GUIDANCE_TEXT = {
    Guidance.TOO_LOW: "Tighten ↑",
    Guidance.TOO_HIGH: "Loosen ↓",
    Guidance.IN_TUNE: "In tune",
}


class TunerWindow(QMainWindow):
    """
    Main window for guitar tuning.

    Features:
    - Large note name of the string being tuned
    - Measured and target frequency
    - Cents meter with in-tune deadband

    A timer pulls one frame per tick from the audio source, so capture and
    analysis stay on the GUI thread, one frame at a time.
    """

    # Passes without a directive before the reading is cleared
    HOLD_PASSES = 8

    def __init__(self, config: TunerConfig | None = None, source: AudioSource | None = None):
        super().__init__()
        self.setWindowTitle("Guitar Tuner")
        self.setMinimumSize(420, 300)

        self._config = config or TunerConfig()
        self._tuner = GuitarTuner(self._config)
        self._sink = CallbackSink(self.show_directive)
        self._source = source
        self._idle_passes = 0

        self._setup_ui()
        self.setStyleSheet(MAIN_WINDOW_STYLE)

        self._timer = QTimer()
        self._timer.timeout.connect(self._on_tick)

        self._start_audio()

    def _setup_ui(self):
        """Set up the UI components."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(15, 15, 15, 15)
        layout.setSpacing(10)

        self._note_label = QLabel("--")
        self._note_label.setObjectName("noteLabel")
        self._note_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._note_label)

        self._detail_label = QLabel("")
        self._detail_label.setObjectName("detailLabel")
        self._detail_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._detail_label)

        meter_row = QHBoxLayout()
        self._meter = CentsMeter(deadband=self._config.in_tune_cents)
        meter_row.addWidget(self._meter)
        layout.addLayout(meter_row)

        self._guidance_label = QLabel("")
        self._guidance_label.setObjectName("detailLabel")
        self._guidance_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._guidance_label)

        self._status_label = QLabel("")
        self._status_label.setObjectName("statusLabel")
        layout.addWidget(self._status_label)

    def _start_audio(self):
        """Open the input device (unless a source was given) and start the timer."""
        if self._source is None:
            try:
                self._source = SoundDeviceSource(
                    sample_rate=self._config.sample_rate,
                    frame_length=self._config.frame_length,
                )
            except AudioSourceError as e:
                self._status_label.setText(f"Audio error: {e}")
                return
        self._status_label.setText("Listening...")
        self._timer.start(0)

    def _stop_audio(self):
        """Stop the timer and release the source."""
        self._timer.stop()
        if self._source is not None:
            self._source.close()
            self._source = None

    def _on_tick(self):
        """Process one frame."""
        try:
            result = self._tuner.step(self._source, self._sink)
        except EndOfStream:
            self._stop_audio()
            self._status_label.setText("Input finished")
            return

        if result is None or not result.valid:
            self._idle_passes += 1
            if self._idle_passes >= self.HOLD_PASSES:
                self.set_inactive()

    def show_directive(self, directive: TuningDirective):
        """Display a stable reading."""
        self._idle_passes = 0
        color = zone_color(directive.cents, self._config.in_tune_cents)

        self._note_label.setText(directive.note.name)
        self._note_label.setStyleSheet(f"color: {color};")
        self._detail_label.setText(
            f"{directive.frequency:.2f} Hz  (target {directive.note.frequency:.2f} Hz)"
        )
        self._guidance_label.setText(
            f"{directive.cents:+.1f} cents - {_GUIDANCE_TEXT[directive.guidance]}"
        )
        self._meter.set_cents(directive.cents)

    def set_inactive(self):
        """Clear the reading."""
        self._note_label.setText("--")
        self._note_label.setStyleSheet("")
        self._detail_label.setText("")
        self._guidance_label.setText("")
        self._meter.set_inactive()

    def closeEvent(self, event):
        self._stop_audio()
        super().closeEvent(event)


def main(config: TunerConfig | None = None, source: AudioSource | None = None) -> int:
    """Main entry point for the guitar tuner GUI; returns the Qt exit code."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setStyle("Fusion")

    window = TunerWindow(config, source)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
