"""
loguru sinks for hosts and the CLI.

The engine only emits records through ``from loguru import logger``; nothing
here runs on import. A host either calls ``setup_logging`` itself or hands a
validated ``LoggingConfig`` to ``configure_logging``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from waqf_engine.core.config_schema import LoggingConfig

CONSOLE_FORMAT = "<level>{level: <8}</level> <cyan>{name}</cyan> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Replace all loguru sinks with stderr and, optionally, a rotating file.

    Args:
        level: Minimum level name, any case (DEBUG, INFO, WARNING, ...).
        log_file: Path of the audit log. Contribution decisions and status
            changes are logged at INFO, so point a file sink at INFO to keep them.
        rotation: Size or interval at which the file rolls over.
        retention: How long rolled files are kept.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)


def configure_logging(logging_config: LoggingConfig) -> None:
    setup_logging(level=logging_config.level, log_file=logging_config.file)
