"""
Logging setup for the harvester.
"""
import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Replace loguru's default sink with the harvester sinks.

    Args:
        level: Minimum level; falls back to ``LOG_LEVEL`` and then INFO
        log_dir: When given, also write rotating log files there
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "harvester_{time}.log"),
            rotation="1 day",
            retention="7 days",
            level=level,
        )
