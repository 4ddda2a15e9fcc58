"""Logging configuration for lumentrace."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None, name: str = "lumentrace") -> logging.Logger:
    """
    Set up logging for the package.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); INFO if None
        name: Logger name

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Calling twice replaces the handler instead of duplicating output
    for handler in list(logger.handlers):
        if getattr(handler, "_lumentrace", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._lumentrace = True
    logger.addHandler(console_handler)

    return logger
