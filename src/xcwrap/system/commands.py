"""
Command execution utilities.

This module provides the blocking helper used for short external calls
(device enumeration).
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


def run_command(
    command: List[str], cwd: Optional[Path] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output with robust error handling.

    Args:
        command: The argument list to execute (no shell is involved).
        cwd: Working directory for the command, or None for the current one.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 when the command could not be started at all.

    Note:
        Uses UTF-8 decoding with error replacement for robust text handling.
    """
    logger.debug(f"Executing command: {command} in '{cwd or '.'}'")
    try:
        process = subprocess.run(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        logger.error(f"Command not found: {command[0]}: {type(e).__name__}: {e}")
        return -1, "", f"Command not found '{command[0]}'"
    except OSError as e:
        logger.error(f"Could not run '{command[0]}': {type(e).__name__}: {e}")
        return -1, "", f"Could not run '{command[0]}': {e}"

