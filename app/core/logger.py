"""
Logging setup for the `app` logger tree.

Modules log through logging.getLogger(__name__); since every module lives
under the `app` package, configuring the `app` logger once at startup is enough.
"""
import logging
import sys

from app.config import settings


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("app")
    logger.setLevel(settings.log_level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger
