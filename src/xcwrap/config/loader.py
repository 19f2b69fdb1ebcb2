"""
Reading the wrapper's TOML configuration file.

Only the ``[wrapper]`` table is of interest; other tables are ignored so the
file can be shared with other tools.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse ``file_path`` into a dictionary.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If it is not valid TOML
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    logger.debug(f"Reading {description} {file_path}")
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {file_path}",
            severity=ErrorSeverity.ERROR,
            reraise=False,
            logger=logger
        )
        raise


def load_wrapper_section(config_path: Path) -> Dict[str, Any]:
    """Return the ``[wrapper]`` table of ``config_path`` (empty if absent)."""
    wrapper = load_toml_file(config_path, "wrapper configuration file").get("wrapper", {})
    if not wrapper:
        logger.debug(f"{config_path} has no [wrapper] table, using defaults")
    return wrapper
