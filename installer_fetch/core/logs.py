# installer_fetch/core/logs.py
"""
Logging setup for the installer fetcher.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the CLI (or by an embedding front-end).

- stderr handler at INFO (DEBUG when INSTALLER_FETCH_DEBUG is set)
- rotating file log under ./logs when INSTALLER_FETCH_DEBUG is set
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

ROOT_LOGGER = "installer_fetch"
_LOG_PATH = os.path.join("logs", "installer_fetch.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def debug_enabled() -> bool:
    return os.getenv("INSTALLER_FETCH_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(*, verbose: bool = False, log_path: str | None = None) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    debug = verbose or debug_enabled()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Avoid duplicate handlers if called twice (REPL/tests)
    if logger.handlers:
        return logger

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug else logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(console)

    if debug:
        path = log_path or _LOG_PATH
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
            handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="(%Y-%m-%d %H:%M:%S)"))
            logger.addHandler(handler)
        except OSError:
            # console logging keeps working without the file
            logger.warning("Could not open debug log file %s", path)

    return logger
