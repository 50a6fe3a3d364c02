"""
Logging setup for the storefront.

Usage:
    from storefront.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Control characters that would let catalog or storage data forge log lines
_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def _configure_root_logger() -> None:
    """Attach a stdout handler once; LOG_LEVEL picks the level (default INFO)."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    # One line per catalog request is noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_for_logging(value, max_length: int = 50) -> str:
    """
    Escape and truncate untrusted text before it reaches a log line.

    Product ids are logged with max_length=8, payload excerpts with the
    default. Empty values become "N/A".
    """
    if not value:
        return "N/A"
    safe_value = str(value).translate(_ESCAPES)
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = ["LOG_FORMAT", "get_logger", "sanitize_for_logging"]
