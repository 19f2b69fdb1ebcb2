"""
Configuration management for the xcwrap package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    is_config_loaded,
    reset_config_path,
    set_config_path,
)

from .loader import load_toml_file, load_wrapper_section
from .validators import validate_wrapper_config

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "reset_config_path",
    "clear_config_cache",
    "is_config_loaded",
    # Advanced interface
    "load_toml_file",
    "load_wrapper_section",
    "validate_wrapper_config",
]
