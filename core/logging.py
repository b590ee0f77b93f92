"""
Storefront logging.

Importing this module attaches one stdout handler to the root logger.
Session ids, product ids and storage keys reach log lines from request
data, so they go through safe_id()/safe_text() first.
"""

import logging
import sys
from functools import cache

from core import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Hosted logs already carry timestamps
LOG_FORMAT_PRODUCTION = "%(levelname)s - %(name)s - %(message)s"

# The Upstash REST client logs every request through these
QUIET_LOGGERS = ("httpx", "httpcore")

# Line breaks would let a client forge extra log records
_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})

ID_LOG_LENGTH = 8


def configure_logging(level: str = config.LOG_LEVEL, production: bool = config.PRODUCTION) -> None:
    """Attach the storefront handler unless the host (pytest, uvicorn) already did."""
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, level, logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_PRODUCTION if production else LOG_FORMAT))
    root.setLevel(numeric_level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def safe_text(value, limit: int = 50) -> str:
    """
    Render a client-supplied value for a log line.

    Control characters are escaped and anything past `limit` characters is
    replaced by "...". Empty values log as "N/A".
    """
    if value is None or value == "":
        return "N/A"
    text = str(value).translate(_CONTROL_CHARS)
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def safe_id(value) -> str:
    """Product/session/order id shortened to its first 8 characters."""
    if value is None or value == "":
        return "N/A"
    return str(value).translate(_CONTROL_CHARS)[:ID_LOG_LENGTH]


__all__ = ["configure_logging", "get_logger", "safe_id", "safe_text"]
