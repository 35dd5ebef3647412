from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from .config import LOG_DIR, LOG_NAME

_LOGGER_NAME = "gambiteditor"


def ensure_log_dir() -> str:
    os.makedirs(LOG_DIR, exist_ok=True)
    return LOG_DIR


def log_file_path() -> str:
    return os.path.join(ensure_log_dir(), LOG_NAME)


def setup_logging(level: int = logging.DEBUG) -> logging.Logger:
    """Configure a rotating file logger under the configured log directory.

    Returns the configured top-level logger ("gambiteditor").
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers if called twice
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        fhandler = RotatingFileHandler(log_file_path(), maxBytes=512_000, backupCount=3, encoding="utf-8")
        fhandler.setLevel(logging.DEBUG)
        fhandler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(fhandler)

    # RotatingFileHandler is itself a StreamHandler subclass
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(ch)

    logger.debug("Logging initialized at %s", log_file_path())
    return logger
