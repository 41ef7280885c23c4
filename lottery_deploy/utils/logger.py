"""Logging setup for deploy runs, tasks and tests.

Handlers are attached to the root logger the first time `get_logger` is
called. `LOG_LEVEL` picks the level (INFO by default) and `LOG_FILE`, when
set, adds a file next to the console output. Both are read from the process
environment at that moment, so `.env` has to be loaded before the first
logger is created.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_handlers: List[logging.Handler] = []


def _build_handlers(log_file: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(path, encoding='utf-8'))
        except OSError as e:
            logging.getLogger(__name__).warning(f"Cannot log to {path}: {e}")
    return handlers


def configure_logging() -> None:
    """Attach console (and optional file) handlers once per process"""
    if _handlers:
        return

    level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in _build_handlers(os.getenv('LOG_FILE', '')):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _handlers.append(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
