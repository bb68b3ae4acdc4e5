"""
Logging Configuration Module

All modules log through children of the ``txncategorizer`` logger. Records
carry the thread name because updates run on the ``model_update`` and
``knn_trainer`` worker threads while predictions run on the caller's.

Usage:
    from txncategorizer.logging_config import setup_logging, get_logger

    setup_logging()  # once, at startup
    logger = get_logger(__name__)
    logger.info("Service ready")
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from txncategorizer.config import get_config

PACKAGE_LOGGER = "txncategorizer"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)-14s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("werkzeug", "urllib3", "flask_cors")

_logging_configured = False


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Configure the package logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Falls back to
            ``TXNCATEGORIZER_LOG_LEVEL``.
        log_file: Optional file to log to in addition to stdout. Falls back
            to ``TXNCATEGORIZER_LOG_FILE``.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    config = get_config()
    numeric_level = getattr(logging, (level or config.logging.level).upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()
    for handler in _build_handlers(log_file or config.logging.log_file):
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Args:
        name: Usually ``__name__``. Names outside the package are nested
            under it so they share its handlers.
    """
    if not _logging_configured:
        setup_logging()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop handlers so the next call reconfigures (useful for testing)."""
    global _logging_configured
    _logging_configured = False
    logging.getLogger(PACKAGE_LOGGER).handlers.clear()
