"""Logging configuration.

Modules log through ``logging.getLogger(__name__)``, i.e. children of the
``rulemock`` logger. Nothing is configured on import; call ``init_logging``
to attach a handler driven by the environment:

- RULEMOCK_LOG_FILE: write to this file instead of stderr
- RULEMOCK_VERBOSE=1: log at DEBUG (rule registration, matches) instead of WARNING
"""

import logging
import os

# Configuration from environment
LOG_FILE = os.environ.get("RULEMOCK_LOG_FILE")
VERBOSE = os.environ.get("RULEMOCK_VERBOSE", "0") == "1"

LOGGER_NAME = "rulemock"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def init_logging() -> logging.Logger:
    """Initialize logging. Returns the package logger."""
    close_logging()
    logger.setLevel(logging.DEBUG if VERBOSE else logging.WARNING)
    logger.propagate = False
    if LOG_FILE:
        handler = logging.FileHandler(LOG_FILE)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


def close_logging() -> None:
    """Detach and close the handlers added by init_logging."""
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            continue
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
