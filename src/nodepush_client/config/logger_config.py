"""Logger configuration for the nodepush client.

Connectors and pollers log through ``logger.bind(component=...)``; records
from anywhere else are tagged with the ``nodepush`` default so the component
column is always filled.
"""

import sys
from typing import List

from loguru import logger

from .settings import LoggingConfig

DEFAULT_COMPONENT = "nodepush"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[component]}</magenta> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {name}:{function}:{line} - {message}"


def setup_logging(config: LoggingConfig) -> List[int]:
    """Replace all loguru sinks with the ones described by ``config``.

    Returns:
        Ids of the sinks that were added
    """
    logger.remove()
    logger.configure(extra={"component": DEFAULT_COMPONENT})

    sink_ids = []

    if config.to_console:
        sink_ids.append(logger.add(sink=sys.stderr, format=CONSOLE_FORMAT, level=config.level, colorize=True))

    if config.to_file:
        config.file_path.parent.mkdir(parents=True, exist_ok=True)
        sink_ids.append(
            logger.add(
                sink=str(config.file_path),
                format=FILE_FORMAT,
                level=config.level,
                rotation=config.rotation,
                retention=config.retention,
                compression="gz",
                enqueue=True,  # sends finish on worker threads
            )
        )
        logger.info(f"File logging enabled: {config.file_path} (level {config.level}, rotation {config.rotation}, retention {config.retention})")

    return sink_ids
