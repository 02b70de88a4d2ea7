"""Logging helpers."""
from __future__ import annotations

import logging
from logging import handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_path: Path, level: int = logging.INFO) -> handlers.RotatingFileHandler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = handlers.RotatingFileHandler(
        log_path, maxBytes=512000, backupCount=3, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    return handler
