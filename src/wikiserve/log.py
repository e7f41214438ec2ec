"""Logging setup.

Loggers are named after the components of the server so that log lines can be
filtered per component. The level names of the classic syslog-style priority
scale (trace, notice, alert, emergency) are registered next to the standard
library levels.
"""

import logging
from enum import StrEnum

TRACE = 5
NOTICE = 25
ALERT = 60
EMERGENCY = 70

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(ALERT, "ALERT")
logging.addLevelName(EMERGENCY, "EMERGENCY")

ROOT_LOGGER = "wikiserve"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": NOTICE,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": ALERT,
    "emergency": EMERGENCY,
}


class Component(StrEnum):
    """Server components that emit log records."""

    MAIN = "main"
    SERVER = "server"
    PAGES = "pages"
    CLASSIFIER = "classifier"
    LISTING = "listing"
    DISPATCH = "dispatch"
    RENDERER = "renderer"


def get_logger(component: Component) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def parse_level(name: str) -> int:
    """Parse a log level name.

    Args:
        name: Level name, case-insensitive (e.g., "notice", "DEBUG")

    Returns:
        Numeric logging level

    Raises:
        ValueError: If the name is not a known level
    """
    level = _LEVELS.get(name.strip().lower())
    if level is None:
        known = ", ".join(_LEVELS)
        raise ValueError(f"Unknown log level {name!r} (expected one of: {known})")
    return level


def configure_logging(level: int) -> None:
    """Attach a stream handler to the package logger.

    Calling it again replaces the previous handler, so tests and repeated CLI
    invocations do not duplicate output.

    Args:
        level: Threshold for records emitted by the server
    """
    global _handler

    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(level)
