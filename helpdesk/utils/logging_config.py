"""
Application logging.

Every module logs through the shared ``helpdesk`` logger. It writes to stdout
so the API process and the Celery worker produce the same line format, and it
drops to DEBUG when the DEBUG setting is on.
"""

import logging
import sys

from helpdesk.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(name: str = "helpdesk", debug: bool = settings.DEBUG) -> logging.Logger:
    """
    Returns the named logger, attaching a stdout handler on first use only.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)
    return logger


logger = setup_logging()
