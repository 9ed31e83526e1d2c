"""
lifehooks Utils Package
========================
Logging utilities.
"""

from .logger import (
    setup_logging,
    LogConfig,
    DEFAULT_LOG_DIR,
)

__all__ = [
    'setup_logging',
    'LogConfig',
    'DEFAULT_LOG_DIR',
]
