import sys

from loguru import logger

from .config import Config


VERBOSE = Config.VERBOSE
LOG_PATH = Config.LOG_PATH
LOG_LEVEL = Config.LOG_LEVEL
LOG_ROTATION = Config.LOG_ROTATION
LOG_RETENTION = Config.LOG_RETENTION


# Library code stays quiet unless the application opts in
logger.disable("magneturi")

# Log to a file
if LOG_PATH:
    logger.enable("magneturi")
    logger.add(
        LOG_PATH,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        level=LOG_LEVEL,
        filter="magneturi",
    )

# Log to console
if VERBOSE:
    logger.enable("magneturi")
    logger.add(
        sink=sys.stderr,
        level=LOG_LEVEL,
        filter="magneturi",
    )
