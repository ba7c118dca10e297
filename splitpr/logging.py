import logging
import sys

LOGGER_NAME = "splitpr"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Configure the package logger to write to stderr.

    stdout is left alone so dry-run listings can be piped. Repeated calls
    replace the handler installed earlier, so it follows the current stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for old in [h for h in logger.handlers if h.get_name() == LOGGER_NAME]:
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(LOGGER_NAME)
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
