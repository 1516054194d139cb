import logging

from ..config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Named logger with a single stream handler, level taken from settings.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
