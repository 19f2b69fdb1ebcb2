"""
Process-wide access to the wrapper configuration.

The configuration is read lazily on the first ``get_config()`` call and
cached; ``set_config_path`` or ``clear_config_cache`` force a fresh read.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import WrapperConfig
from ..validation import ErrorSeverity, handle_config_error
from .loader import load_wrapper_section
from .validators import validate_wrapper_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[WrapperConfig] = None

# <repository root>/conf/config.toml; may be absent.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Read configuration from ``config_path`` from now on.

    Unlike the default location, an explicitly chosen file has to exist;
    the next ``get_config()`` fails otherwise.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.debug(f"Configuration path set to: {config_path}")


def reset_config_path() -> None:
    set_config_path(_DEFAULT_CONFIG_FILE_PATH)


def clear_config_cache() -> None:
    """Drop the cached configuration so the file is read again."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> WrapperConfig:
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.debug(f"No configuration file at {config_path}, using built-in defaults")
        return WrapperConfig()

    try:
        config = validate_wrapper_config(load_wrapper_section(config_path))
    except OSError as e:
        handle_config_error(
            error=e,
            context=f"loading {config_path}",
            severity=ErrorSeverity.ERROR,
            reraise=False,
            logger=logger
        )
        raise
    logger.debug(f"Loaded wrapper configuration from {config_path}")
    return config


def get_config() -> WrapperConfig:
    """
    Return the wrapper configuration, reading it on first use.

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If a value in the file is invalid
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None
