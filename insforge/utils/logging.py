"""Package logger shared by every SDK module."""
import logging

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

logger = logging.getLogger("insforge")
logger.addHandler(logging.NullHandler())


def set_log_level(level: int | str) -> None:
    """Set the SDK log level, e.g. ``set_log_level("DEBUG")``."""
    logger.setLevel(level)
