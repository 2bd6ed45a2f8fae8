"""
Logging configuration for EcoBazaar.

One ``ecobazaar`` logger writes to stdout; modules get children of it through
``get_logger(__name__)``.
"""
import logging
import sys

from ecobazaar.utils.settings import LOG_LEVEL

logger = logging.getLogger("ecobazaar")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the ``ecobazaar`` namespace.

    Module names that already start with ``ecobazaar.`` are used as is.
    """
    if not name:
        return logger
    if name == "ecobazaar" or name.startswith("ecobazaar."):
        return logging.getLogger(name)
    return logging.getLogger(f"ecobazaar.{name}")
