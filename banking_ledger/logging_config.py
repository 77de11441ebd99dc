"""
Logging configuration.

Every module logs through logging.getLogger(__name__), which
places it under the "banking_ledger" logger. configure_logging
attaches a single handler there once, at process start.
"""

import logging

ROOT_LOGGER_NAME = "banking_ledger"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Set up the application logger.

    Calling this more than once replaces the previous handler
    instead of stacking duplicates.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # The handler above is the only output; don't repeat through root
    logger.propagate = False

    return logger
