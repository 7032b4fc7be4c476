"""
Consumers of tuning directives.
"""

import sys
from abc import ABC, abstractmethod
from typing import Callable, TextIO

from .debouncer import Guidance, TuningDirective

_ARROWS = {
    Guidance.TOO_LOW: "↑ tighten",
    Guidance.TOO_HIGH: "↓ loosen",
    Guidance.IN_TUNE: "✓ in tune",
}


class DirectiveSink(ABC):
    """Renders or acts on tuning directives."""

    @abstractmethod
    def emit(self, directive: TuningDirective):
        """Handle one directive."""


class CallbackSink(DirectiveSink):
    """Forwards directives to a callable."""

    def __init__(self, callback: Callable[[TuningDirective], None]):
        self._callback = callback

    def emit(self, directive: TuningDirective):
        self._callback(directive)


def format_directive(directive: TuningDirective) -> str:
    """One-line text rendering of a directive."""
    return (
        f"{directive.note.name} (string {directive.string_number}) | "
        f"{directive.frequency:7.2f} Hz / {directive.note.frequency:7.2f} Hz | "
        f"{directive.cents:+6.1f} cents {_ARROWS[directive.guidance]}"
    )


class ConsoleSink(DirectiveSink):
    """Prints one line per directive."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def emit(self, directive: TuningDirective):
        print(format_directive(directive), file=self._stream or sys.stdout, flush=True)
