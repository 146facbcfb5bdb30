"""Logging configuration."""

import logging
import sys
from typing import Optional

from stockledger.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the stock ledger.

    Thread names are part of the format: concurrent units of work on the
    endpoint thread pool log interleaved retries.
    """
    level_name = (level or get_settings().log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("stockledger").setLevel(level_name)

    # Reduce noise from third-party libraries
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
