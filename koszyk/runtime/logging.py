"""Logging setup for the ``koszyk`` logger namespace.

Every module logs through ``get_logger(__name__)``; the first call installs a
single stderr handler on the ``koszyk`` logger.

    from koszyk.runtime import get_logger
    logger = get_logger(__name__)
    logger.warning("No purchase date found")

KOSZYK_LOG_LEVEL picks the initial level (DEBUG, INFO, WARNING, ERROR).
DEBUG output also carries the source line number.
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOGGER_NAMESPACE = "koszyk"
LOG_LEVEL_ENV = "KOSZYK_LOG_LEVEL"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def _level_from_env() -> int:
    return _LEVEL_NAMES.get(os.environ.get(LOG_LEVEL_ENV, "").strip().upper(), DEFAULT_LOG_LEVEL)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Install the namespace handler once; later calls are no-ops."""
    global _handler

    if _handler is not None:
        return

    if level is None:
        level = _level_from_env()

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(_formatter_for(level))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(_handler)
    namespace_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``koszyk`` namespace (``koszyk.*`` module names kept as-is)."""
    configure_logging()

    if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the namespace level at runtime, e.g. for ``koszyk --verbose``."""
    configure_logging(level)
    logging.getLogger(LOGGER_NAMESPACE).setLevel(level)
    if _handler is not None:
        _handler.setFormatter(_formatter_for(level))
