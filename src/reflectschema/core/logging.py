"""Logging setup for reflectschema.

Library modules only ask for a logger; handlers are installed by the command
line entry point through :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


_CONFIGURED = False
_LOG_FORMAT = "%(asctime)s,%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """Install the console handler once, set the level, optionally mirror to a file."""
    global _CONFIGURED
    if not _CONFIGURED:
        logging.basicConfig(format=_LOG_FORMAT, datefmt=_DATE_FORMAT)
        _CONFIGURED = True
    root = logging.getLogger()
    root.setLevel(level)
    if log_file is not None:
        _mirror_to_file(root, log_file.expanduser().resolve(), level)


def _mirror_to_file(root: logging.Logger, path: Path, level: int) -> logging.FileHandler:
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(path):
            handler.setLevel(level)
            return handler
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
