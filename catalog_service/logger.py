"""
Logging setup for the catalog service.

Configures the package logger once; modules use logging.getLogger(__name__).
"""
import logging
import sys

from .config import LOG_LEVEL

logger = logging.getLogger("catalog_service")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)

logger.propagate = False
