"""Logging setup for the blood donation console."""

import logging
import sys
from pathlib import Path
from typing import Optional

APP_LOGGER = "blood_donation"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logger(
    name: str = APP_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Handlers are attached once; Streamlit reruns the script on every
    interaction, so later calls return the already configured logger.

    Args:
        name: Logger name.
        level: Logging level.
        log_file: Optional path to log file. If None, logs to stderr only.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(level)
    log.propagate = False
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Map 'debug' / 'WARNING' etc. to a logging level; unknown names give default."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)
