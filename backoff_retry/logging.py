"""
Logging setup for processes that run retry policies.

The package only ever logs to the "backoff-retry" logger and never installs
handlers itself. Services call configure_logging() once at startup, e.g.:

    configure_logging()                      # LOG_LEVEL / RETRY_LOG_LEVEL from env
    configure_logging("DEBUG", "ERROR")      # explicit, env ignored
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

RETRY_LOGGER = "backoff-retry"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _level(name: str, default: int) -> int:
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[str] = None, retry_level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=_level(level or os.getenv("LOG_LEVEL", "INFO"), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # retry warnings are per attempt; noisy services raise this to ERROR
    retry_level = retry_level or os.getenv("RETRY_LOG_LEVEL", "")
    if retry_level:
        logging.getLogger(RETRY_LOGGER).setLevel(_level(retry_level, logging.WARNING))
    logging.getLogger("httpx").setLevel(logging.WARNING)
