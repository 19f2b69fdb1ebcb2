"""
Log management for the orchestration module.

This module handles the build log: opening it before the child is spawned,
appending captured output as it arrives, closing it during teardown, and the
independent best-effort read used for error extraction.
"""

import logging
from pathlib import Path
from typing import Optional

from ..validation import ErrorSeverity, SetupError, handle_error
from .shared_state import SupervisedRun

logger = logging.getLogger(__name__)


class LogManager:
    """
    Owns the log sink of a supervised run.

    Writes after the sink has been closed are dropped silently: teardown may
    close the sink while the output reader is still delivering its last
    chunks.
    """

    def __init__(self, state: SupervisedRun):
        self.state = state
        self.log_path: Optional[Path] = None
        self._write_failed = False

    def open_log_file(self, path: Path) -> None:
        """
        Open (and truncate) the log file for this run.

        Raises:
            SetupError: If the file cannot be created
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.state.log_sink = open(path, "wb")
        except OSError as e:
            raise SetupError(f"Cannot open log file {path}: {e}") from e
        self.log_path = path
        self._write_failed = False
        logger.debug(f"Opened log file {path}")

    @property
    def is_open(self) -> bool:
        return self.state.log_sink is not None and not self.state.log_sink.closed

    def write(self, chunk: bytes) -> None:
        """Append a chunk of child output."""
        if not self.is_open or self._write_failed:
            return
        try:
            self.state.log_sink.write(chunk)
        except (OSError, ValueError) as e:
            # Keep draining the child even if the disk is full.
            self._write_failed = True
            handle_error(
                error=e,
                context=f"writing log file {self.log_path}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )

    def close_log_file(self) -> None:
        """Close the log sink; safe to call more than once."""
        sink = self.state.log_sink
        if sink is None:
            logger.debug("No log file to close")
            return
        try:
            sink.close()
            logger.debug(f"Closed log file {self.log_path}")
        except OSError as e:
            handle_error(
                error=e,
                context=f"closing log file {self.log_path}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )
        finally:
            self.state.log_sink = None


def read_log_text(path: Path) -> Optional[str]:
    """
    Read the log back for diagnostics.

    Returns:
        The decoded log text, or None if it could not be read
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.debug(f"Could not read log file {path}: {e}")
        return None
