"""Logging setup shared by scripts and embedding applications."""

from __future__ import annotations

import logging

from .config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler; falls back to the LOG_LEVEL setting."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
