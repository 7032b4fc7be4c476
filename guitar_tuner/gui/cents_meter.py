"""
Cents meter widget - horizontal needle showing deviation from the target note.
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from ..constants import IN_TUNE_CENTS
from .styles import (
    ACCENT_GREEN,
    BORDER_COLOR,
    ERROR_RED,
    METER_BACKGROUND,
    PANEL_BACKGROUND,
    TEXT_SECONDARY,
    WARNING_ORANGE,
)


def needle_fraction(cents: float, span: float) -> float:
    """Needle position from 0.0 (-span) to 1.0 (+span), clamped."""
    return max(0.0, min(1.0, 0.5 + cents / (2.0 * span)))


def zone_color(cents: float, deadband: float) -> str:
    """Green inside the deadband, orange up to 3x it, red beyond."""
    magnitude = abs(cents)
    if magnitude <= deadband:
        return ACCENT_GREEN
    if magnitude <= 3 * deadband:
        return WARNING_ORANGE
    return ERROR_RED


class CentsMeter(QWidget):
    """
    Horizontal tuning meter.

    Displays:
    - A shaded deadband around the centre line
    - A needle at the current cents deviation, colored by zone
    - A short gray mark when no reading is active
    """

    def __init__(self, span: float = 50.0, deadband: float = IN_TUNE_CENTS, parent=None):
        super().__init__(parent)
        self._span = span
        self._deadband = deadband
        self._cents = 0.0
        self._active = False

        self.setMinimumSize(300, 48)

    def set_cents(self, cents: float):
        """Show a new reading."""
        self._cents = cents
        self._active = True
        self.update()

    def set_inactive(self):
        """Hide the needle (no stable reading)."""
        self._active = False
        self.update()

    def paintEvent(self, event):
        """Paint the meter."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        margin = 4
        x = margin
        y = margin
        width = self.width() - 2 * margin
        height = self.height() - 2 * margin

        # Background with border
        painter.setPen(QPen(QColor(BORDER_COLOR), 1))
        painter.setBrush(QBrush(QColor(PANEL_BACKGROUND)))
        painter.drawRoundedRect(x, y, width, height, 3, 3)

        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(METER_BACKGROUND)))
        painter.drawRect(x + 2, y + 2, width - 4, height - 4)

        # Deadband
        low = x + width * needle_fraction(-self._deadband, self._span)
        high = x + width * needle_fraction(self._deadband, self._span)
        band = QColor(ACCENT_GREEN)
        band.setAlpha(60)
        painter.setBrush(QBrush(band))
        painter.drawRect(int(low), y + 2, int(high - low), height - 4)

        # Tick marks every 10 cents
        painter.setPen(QPen(QColor(BORDER_COLOR), 1))
        tick = -int(self._span)
        while tick <= self._span:
            tick_x = x + width * needle_fraction(tick, self._span)
            tick_len = height // 2 if tick == 0 else height // 4
            painter.drawLine(int(tick_x), y + height - tick_len, int(tick_x), y + height)
            tick += 10

        if self._active:
            needle_x = x + width * needle_fraction(self._cents, self._span)
            painter.setPen(QPen(QColor(zone_color(self._cents, self._deadband)), 3))
            painter.drawLine(int(needle_x), y + 2, int(needle_x), y + height - 2)
        else:
            centre = x + width // 2
            painter.setPen(QPen(QColor(TEXT_SECONDARY).darker(200), 3))
            painter.drawLine(centre, y + height - 6, centre, y + height - 2)
