"""
lifehooks CLI Package
======================
Command-line interface for lifehooks.
"""

from .main import app, main_entry

__all__ = [
    'app',
    'main_entry',
]
