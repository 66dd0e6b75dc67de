"""Logging helpers for the GNSS viewer."""

from __future__ import annotations

import logging


def get_logger(name: str = "gnss_viewer", level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    root = logging.getLogger(name.split(".", 1)[0])
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(level)
    return logger
