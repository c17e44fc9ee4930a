"""
Logging for SunTrack.

The calculators are pure and log little. Missing sunrises and unreachable
elevation thresholds are logged at DEBUG, as are coordinates outside every
timezone region. A failing timezone provider is a WARNING. The API logs
startup at INFO and unexpected endpoint failures at ERROR with a traceback.

INFO and DEBUG go to stdout, WARNING and ERROR to stderr. The level comes
from LOG_LEVEL.
"""

import logging
import sys
from suntrack.config import LOG_LEVEL


class LevelFilter(logging.Filter):
    """Filter log records by level range."""

    def __init__(self, level_min: int, level_max: int):
        super().__init__()
        self.level_min = level_min
        self.level_max = level_max

    def filter(self, record: logging.LogRecord) -> bool:
        return self.level_min <= record.levelno <= self.level_max


def setup_logging() -> logging.Logger:
    """
    Configure the suntrack logger to write to stdout/stderr.

    Returns:
        Logger instance for suntrack
    """
    logger = logging.getLogger("suntrack")
    logger.setLevel(LOG_LEVEL)
    logger.propagate = False

    # Reload safety
    logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(LevelFilter(logging.DEBUG, logging.INFO))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)

    # Format: "2025-01-15 14:30:45 - suntrack - INFO - Message"
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    stdout_handler.setFormatter(formatter)
    stderr_handler.setFormatter(formatter)

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)

    return logger


# Global logger instance
logger = setup_logging()
