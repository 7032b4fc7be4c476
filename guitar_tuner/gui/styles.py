"""
Colors and style sheets for the tuner window.
"""

WINDOW_BACKGROUND = "#1e1e1e"
PANEL_BACKGROUND = "#2a2a2a"
METER_BACKGROUND = "#151515"
BORDER_COLOR = "#3c3c3c"
TEXT_PRIMARY = "#f0f0f0"
TEXT_SECONDARY = "#8a8a8a"
ACCENT_GREEN = "#3fbf5f"
WARNING_ORANGE = "#e8a33d"
ERROR_RED = "#d9534f"

MAIN_WINDOW_STYLE = f"""
QMainWindow, QWidget {{
    background-color: {WINDOW_BACKGROUND};
    color: {TEXT_PRIMARY};
}}
QLabel#noteLabel {{
    font-size: 72px;
    font-weight: bold;
}}
QLabel#detailLabel {{
    font-size: 18px;
    color: {TEXT_SECONDARY};
}}
QLabel#statusLabel {{
    font-size: 12px;
    color: {TEXT_SECONDARY};
}}
"""
