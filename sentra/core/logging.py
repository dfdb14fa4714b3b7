import logging
from typing import Optional

from sentra.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``sentra`` logger."""
    logger = logging.getLogger("sentra")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        log_file = log_file or settings.LOG_FILE
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
