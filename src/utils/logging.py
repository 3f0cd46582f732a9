"""Logging setup for cv-scorer.

All modules log through children of the `cv_scorer` logger. Output goes
to stderr, and optionally to an append-only run log so that batch
re-scoring runs leave a record of every skipped or failed candidate.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "cv_scorer"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _resolve_level(level: str | None) -> int:
    if level is None:
        return logging.INFO
    return getattr(logging, level.upper(), logging.INFO)


def _file_handler_for(logger: logging.Logger, path: Path) -> logging.FileHandler | None:
    target = str(path.resolve())
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler
    return None


def configure_logging(
    level: str | None = None,
    log_file: Path | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the application logger.

    The first call installs a stderr handler and stops propagation to the
    root logger. Later calls only adjust levels, and attach `log_file`
    if it is not attached yet.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to INFO.
        log_file: Optional file that receives the same records (appended).
        format_string: Format string for log records.
        date_format: Format string for timestamps.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    log_level = _resolve_level(level)
    logger.setLevel(log_level)
    formatter = logging.Formatter(format_string, datefmt=date_format)

    if not _configured:
        logger.handlers.clear()
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)
        logger.propagate = False
        _configured = True

    if log_file is not None and _file_handler_for(logger, log_file) is None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the `cv_scorer.<name>` child logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close and drop all handlers so the next configure starts over."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    _configured = False
