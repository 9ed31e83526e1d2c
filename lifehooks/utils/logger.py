"""
Logging Utilities for lifehooks
================================
Rich console logging with optional rotating log files.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


# Default log directory
DEFAULT_LOG_DIR = Path.home() / ".lifehooks" / "logs"

# Log format strings
CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEBUG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(funcName)s | %(message)s"


class LogConfig:
    """Logging configuration"""

    def __init__(
        self,
        level: Union[int, str] = logging.INFO,
        log_dir: Optional[Path] = None,
        log_file: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        debug_mode: bool = False
    ):
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        self.level = level
        self.log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        self.log_file = Path(log_file) if log_file else None
        self.enable_file = enable_file
        self.enable_console = enable_console
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.debug_mode = debug_mode


def setup_logging(
    name: str = "lifehooks",
    config: Optional[LogConfig] = None,
    verbose: bool = False
) -> logging.Logger:
    """
    Set up logging for the application.

    Args:
        name: Logger name
        config: Logging configuration
        verbose: Enable verbose/debug output

    Returns:
        Configured logger
    """
    config = config or LogConfig()

    if verbose:
        config.level = logging.DEBUG
        config.debug_mode = True

    logger = logging.getLogger(name)
    logger.setLevel(config.level)

    # Clear existing handlers
    logger.handlers.clear()

    if config.enable_console:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=config.debug_mode,
            show_path=config.debug_mode,
            rich_tracebacks=True,
            tracebacks_show_locals=config.debug_mode,
            markup=False
        )
        console_handler.setLevel(config.level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    if config.enable_file:
        try:
            log_file = config.log_file or config.log_dir / f"{name}.log"
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)  # Capture everything to file

            file_format = DEBUG_FORMAT if config.debug_mode else FILE_FORMAT
            file_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))

            logger.addHandler(file_handler)
        except OSError as e:
            # Can't log to file, just use console
            if config.enable_console:
                logger.warning(f"Failed to set up file logging: {e}")

    return logger


__all__ = [
    'setup_logging',
    'LogConfig',
    'DEFAULT_LOG_DIR',
]
