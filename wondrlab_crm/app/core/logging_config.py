"""
Logging setup for the CRM API.

``setup_logging`` attaches a console handler and, when a log file is
configured, a size-rotated file handler to the root logger.  Chatty
third-party loggers are held at WARNING unless the application itself
runs at DEBUG.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "urllib3", "httpx")


def resolve_level(level: str) -> int:
    """Map a level name to its number; unknown names give ``INFO``."""
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _build_handlers(logfile: Optional[str], max_bytes: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )
    return handlers


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> bool:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Level name for the application loggers, case insensitive.
    logfile : Optional[str]
        File to log to in addition to the console.  Missing parent
        directories are created.
    max_bytes : int
        Size at which the log file is rotated.
    backup_count : int
        Number of rotated files kept.

    Returns
    -------
    bool
        ``False`` when the root logger already had handlers (pytest,
        a second ``create_app`` call) and nothing was changed.
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    numeric_level = resolve_level(level)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(logfile, max_bytes, backup_count):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    return True
