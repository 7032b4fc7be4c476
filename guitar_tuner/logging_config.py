"""Logging setup for command-line and GUI entry points.

Library modules only create loggers; handlers are installed here, once.
"""

import logging
import sys

_console_handler: logging.Handler | None = None


def setup_logging(level: str = "WARNING"):
    """Send ``guitar_tuner`` log records to stdout at ``level``.

    Args:
        level: Level name, e.g. "DEBUG" or "INFO"

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    global _console_handler

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logger = logging.getLogger("guitar_tuner")
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(_console_handler)

    logger.setLevel(numeric_level)
    logger.propagate = False
