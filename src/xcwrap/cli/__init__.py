"""
Command-line interface for the xcwrap package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
