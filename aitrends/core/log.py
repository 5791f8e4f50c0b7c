"""Logging setup shared by the CLI and the HTTP service."""
from __future__ import annotations
import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure root logging on `stream` (stdout by default) and quiet HTTP libraries."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=stream or sys.stdout,
        force=True,
    )
    logging.getLogger("aitrends").setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
