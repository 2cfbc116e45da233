# parking_lot/utils/logger.py
"""
Logging for the parking backend.

Modules call get_logger(__name__) at import time and never configure anything.
configure_logging(settings) installs the console and rotating-file handlers on
the root logger; create_app() calls it with the app's Settings. Calling it again
swaps out only the handlers it installed before.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_installed: list[logging.Handler] = []


def configure_logging(cfg) -> None:
    level = cfg.LOG_LEVEL.upper()
    root = logging.getLogger()

    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if cfg.LOG_DIR:
        os.makedirs(cfg.LOG_DIR, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=os.path.join(cfg.LOG_DIR, cfg.LOG_FILE),
            maxBytes=cfg.LOG_MAX_BYTES,
            backupCount=cfg.LOG_BACKUP_COUNT,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
