from __future__ import annotations

import logging
import sys

"""Labeled stdout logging for the packtrack CLI.

Lines look like ``LABEL message`` with LABEL one of
DEBUG|INFO|WARN|ERROR|SUMMARY, so log output and the SUMMARY line of an
import share one stream. Package modules log through
``logging.getLogger(__name__)``; those loggers sit under ``packtrack`` and
write through its single handler. With ``--debug`` their DEBUG lines name
the module they came from, e.g. ``DEBUG [csvio.reader] header: 4 columns``.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "packtrack"
SUMMARY_LEVEL = 25  # between INFO and WARNING

LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        label = LEVEL_LABELS.get(record.levelno, record.levelname)
        message = record.getMessage()
        if record.levelno == logging.DEBUG and record.name.startswith(LOGGER_NAME + "."):
            message = f"[{record.name[len(LOGGER_NAME) + 1:]}] {message}"
        return f"{label} {message}"


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


def setup_logging() -> logging.Logger:
    """Return the ``packtrack`` logger, attaching the stdout handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    _drop_handlers(logger)

    # bound to the current sys.stdout (pytest capsys swaps it per test)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    handler.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(enabled: bool = True) -> None:
    level = logging.DEBUG if enabled else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Detach the handler and forget the logger; the next call sets it up again."""
    global _logger
    if _logger is not None:
        _drop_handlers(_logger)
        _logger.setLevel(logging.NOTSET)
    _logger = None
