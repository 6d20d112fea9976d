"""Logging setup for applications embedding fplive.

Engine modules log through ``fplive.*`` loggers and never attach handlers.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_LEVEL_ENV_VAR = 'FPLIVE_LOG_LEVEL'

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
SIMPLE_FORMAT = '%(levelname)s: %(name)s: %(message)s'


def resolve_level(level: Optional[int] = None) -> int:
    """
    Pick the log level: explicit argument, then FPLIVE_LOG_LEVEL, then INFO.

    Raises:
        ValueError: If FPLIVE_LOG_LEVEL names an unknown level
    """
    if level is not None:
        return level
    name = os.environ.get(LOG_LEVEL_ENV_VAR)
    if not name:
        return logging.INFO
    resolved = logging.getLevelName(name.upper())
    if not isinstance(resolved, int):
        raise ValueError(f'Unknown log level in {LOG_LEVEL_ENV_VAR}: {name!r}')
    return resolved


def setup_logging(
    log_dir: Optional[Path] = None,
    level: Optional[int] = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Attach handlers to the ``fplive`` logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: FPLIVE_LOG_LEVEL or INFO)
        log_to_file: Whether to write a timestamped log file (default: False)
        log_to_console: Whether to log to stdout (default: True)

    Returns:
        The configured ``fplive`` logger

    Example:
        from fplive.logging_config import setup_logging
        logger = setup_logging(level=logging.DEBUG)
        logger.info("Scoring gameweek 12")
    """
    level = resolve_level(level)
    logger = logging.getLogger('fplive')
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    handlers: list[logging.Handler] = []
    if log_to_file:
        log_dir = Path(log_dir or 'logs')
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'fplive_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = 'fplive') -> logging.Logger:
    """Logger under the fplive hierarchy (no handlers unless setup_logging() ran)."""
    return logging.getLogger(name)
