"""Handler setup for the ``floorplan_engine`` logger.

Records go to stderr unless another stream is given, so command output on
stdout stays machine-readable.
"""
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "floorplan_engine"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach fresh handlers to the package logger and return it.

    Args:
        level: Threshold for the logger and every handler it gets.
        log_file: Optional path; the file is truncated on each call.
        stream: Console stream, ``sys.stderr`` when omitted.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Calling twice must not duplicate output
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_handler(logging.StreamHandler(stream or sys.stderr), level, formatter))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level, formatter))

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
