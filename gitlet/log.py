import os
import sys

from loguru import logger

from .config import LOG_LEVEL_ENV

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def setup_logging(level=None):
    """Route engine logging to stderr at ``level``.

    ``GITLET_LOG_LEVEL`` wins over the argument so a user can turn on
    tracing without touching the command line.
    """
    level = os.environ.get(LOG_LEVEL_ENV) or level or "WARNING"
    logger.remove()
    logger.enable("gitlet")
    logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper(), colorize=None)
    return level.upper()
