"""
Logging setup shared by the API and the terminal driver.
"""

import logging
import sys
from typing import Optional, TextIO

# Logs every request line at INFO; only shown when debugging.
CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure root logging for finflow.

    The terminal driver passes ``sys.stderr`` so log lines stay out of the
    planning output.
    """
    level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=stream or sys.stdout,
    )
    quiet_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


__all__ = ["configure_logging"]
