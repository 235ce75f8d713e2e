"""
Logging configuration for the npm-facade CLI.

Library use never touches handlers: the package logger only carries a
NullHandler until an application configures logging. The CLI calls
``setup_logging()`` once at startup; every module that does
``logger = logging.getLogger(__name__)`` then reports through it.

Levels are resolved in precedence order:
    CLI flag  >  NPMF_LOG_LEVEL env var  >  WARNING (default)

Optional file output via NPMF_LOG_FILE / NPMF_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "npm_facade"

# ── Format strings ──────────────────────────────────────────────

# WARNING level — the message alone
_FMT_MINIMAL = "%(message)s"

# INFO level — which binding said it
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG level — rendered command lines, file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CONSOLE = "%H:%M:%S"

# File output — always full detail, full date
_FMT_FILE = "%(asctime)s %(levelname)-5s %(threadName)s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.

    Returns:
        The configured package logger.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_CONSOLE
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_CONSOLE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    logger.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        logger.addHandler(fh)

    logger.setLevel(effective_level)
    # Handled here; don't print twice through a configured root logger
    logger.propagate = False
    return logger


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
