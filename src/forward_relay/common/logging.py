import sys

from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO"):
    """Replace the default loguru sink with the service's stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
