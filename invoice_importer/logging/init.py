from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Stdout logging for the import client, one labeled line per record.

All application loggers live under the "invoice_importer" logger, which writes
to stdout as ``<LABEL> <message>`` with the labels DEBUG|INFO|WARN|ERROR|SUMMARY.
SUMMARY is a custom level used for the one-line import result. Module loggers
(``logging.getLogger(__name__)``) propagate into it.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "LabeledFormatter",
    "SUMMARY_LEVEL",
    "enable_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

APP_LOGGER_NAME = "invoice_importer"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter rendering ``<LABEL> <message>``; WARNING is shortened to WARN."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = f"{level_label} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Configure the application logger once and return it.

    Repeated calls return the already configured logger; call
    ``reset_logging()`` first to rebuild it (tests swap stdout between runs).

    Args:
        stream: Output stream, stdout when omitted
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # root handlers would print every line twice
    logger.propagate = False

    _logger = logger
    return logger


def enable_debug(logger: logging.Logger) -> None:
    """Lower the logger and all its handlers to DEBUG."""
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log ``message`` at SUMMARY level (rendered as ``SUMMARY <message>``)."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Detach handlers and forget the configured logger. Mainly for testing purposes."""
    global _logger
    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _logger = None
