"""Process-wide logging setup.

Stdout carries the finished newsletter, so every log record goes to stderr.
"""

import logging
import os
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "INFO"

# HTTP and AWS libraries log every request at DEBUG
NOISY_LOGGERS = ("urllib3", "botocore", "boto3")


def _parse_level(name: str) -> int:
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ValueError(f"Invalid log level: {name}")
    return level


def configure_logging(stream: TextIO | None = None) -> None:
    """Install a single handler on the root logger.

    The level comes from LOG_LEVEL (default INFO). Library loggers in
    NOISY_LOGGERS never go below WARNING.

    :param stream: Destination for log records. Defaults to stderr.
    :raises ValueError: If LOG_LEVEL is not a known level name.
    """
    level_name = os.environ.get("LOG_LEVEL", DEFAULT_LEVEL)
    level = _parse_level(level_name)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug(f"Logging configured: level={logging.getLevelName(level)}")
