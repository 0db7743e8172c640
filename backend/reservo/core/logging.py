"""Logging setup shared by the API processes and Celery workers."""

from __future__ import annotations

import logging
import os
from typing import Optional

DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
PROD_FORMAT = "%(levelname)s | %(message)s"


def setup_logging(env: Optional[str] = None) -> None:
    """Configure root logging based on the ENV environment variable.

    ENV=dev: INFO level with detailed format (default)
    ENV=prod/staging: WARNING level, minimal logs
    """
    env = (env or os.getenv("ENV", "dev")).lower()
    is_dev = env == "dev"

    logging.basicConfig(
        level=logging.INFO if is_dev else logging.WARNING,
        format=DEV_FORMAT if is_dev else PROD_FORMAT,
        datefmt="%H:%M:%S",
    )

    # Request/exception loggers stay chatty in dev only
    if is_dev:
        logging.getLogger("reservo.request").setLevel(logging.INFO)
        logging.getLogger("reservo.exception").setLevel(logging.INFO)

    # pymongo heartbeat logging is noise at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
