import logging
import os
from typing import Optional

LOGGER_NAME = "gradebook_viewer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single console handler to the package logger.

    The level defaults to ``LOG_LEVEL`` from the environment, then INFO.
    Calling this again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, name, logging.INFO))

    if not any(getattr(handler, "_gradebook_viewer", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gradebook_viewer = True
        logger.addHandler(handler)
    return logger
