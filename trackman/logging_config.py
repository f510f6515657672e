import logging
from logging.handlers import RotatingFileHandler
import os

from trackman.config import LOG_DIR, LOG_LEVEL

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name, filename):
    """
    Named logger writing to stderr and, when LOG_DIR is set, to a rotating
    file under it. Several loggers may share one file.
    """
    logger = logging.getLogger(f"trackman.{name}")
    logger.setLevel(LOG_LEVEL)

    # Avoid duplicated handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(FORMAT)

    if LOG_DIR:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, filename),
            maxBytes=5_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # handlers live on each named logger; keep records off the root logger
    logger.propagate = False
    return logger
