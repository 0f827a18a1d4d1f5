import logging

from . import config


def setup_logging(name="memalloc_sim", level=None):
    """Attach a single stream handler to the package logger.

    Calling it again returns the already configured logger unchanged.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = level or config.LOG_LEVEL
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
