"""
Logging setup for the SheetChart client.

Call setup_logging() once from the entry point; modules use
logging.getLogger(__name__).
"""

import logging
import sys
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Attach a plain-text stderr handler to the root logger (idempotent)"""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    _configured = True
