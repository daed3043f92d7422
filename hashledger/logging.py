import logging
import sys

LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'


class StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current sys.stderr"""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


# Structured logger factory
def get_logger(name=None):
    """Return a logger with a standardized format"""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = StderrHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_logging(level="INFO"):
    """Attach the standard handler to the package logger and set its level"""
    logger = get_logger("hashledger")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
