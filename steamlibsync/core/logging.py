"""Centralized logging configuration for Steam Library Sync.

Every module logs through a child of the ``steamlibsync`` logger
(``steamlibsync.<area>``), so one call to :func:`setup_logging` configures
the whole reconciliation run.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["logger", "setup_logging"]

logger = logging.getLogger("steamlibsync")

# Third-party loggers that are too chatty at DEBUG for a sync run
_NOISY_LOGGERS: tuple[str, ...] = ("urllib3", "requests", "charset_normalizer")


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Configure the application logger.

    Args:
        level: The console logging level (default: INFO).
        log_file: Optional path to a log file. The file always receives
            DEBUG output so per-manifest and per-account failures can be
            diagnosed after the fact.
    """
    logger.setLevel(logging.DEBUG if log_file is not None else level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if logger.handlers:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
