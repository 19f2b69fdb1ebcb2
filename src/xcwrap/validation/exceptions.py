"""
Exception types and error handling helpers.

This module defines the validation error used by every validator, the
setup-error taxonomy raised before a build tool is ever spawned, and the
small set of handler helpers used for consistent error logging.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """How loudly handle_error logs a problem."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    A command-line or configuration value was rejected.

    Carries the offending field and value so the CLI can name them in its
    usage error and the config loader in its log message.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class SetupError(Exception):
    """
    Base class for errors detected before the build tool is spawned.

    Setup errors always map to exit status 1 and never produce a log file.
    """


class NoDescriptorFound(SetupError):
    """Raised when the target directory holds no workspace or project."""

    def __init__(self, directory):
        super().__init__(f"No .xcworkspace or .xcodeproj found in {directory}")
        self.directory = directory


class InvalidDevice(SetupError):
    """Raised when the requested device is missing from the enumeration output."""

    def __init__(self, device_name: str, available_devices: str):
        super().__init__(f'Device "{device_name}" not found in available simulators')
        self.device_name = device_name
        self.available_devices = available_devices


class ToolUnavailable(SetupError):
    """Raised when the device enumeration tool cannot be run at all."""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Failed to list devices with '{command}': {reason}")
        self.command = command
        self.reason = reason


_SEVERITY_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log ``error`` as "Error in <context>: ..." and optionally re-raise it.

    Best-effort steps (closing the log, killing a tree that may already be
    gone) call this with ``reraise=False`` so teardown keeps going.

    Args:
        error: The exception that occurred
        context: What was being done, e.g. "closing log file /tmp/x.log"
        severity: ErrorSeverity or its name; CRITICAL also logs the traceback
        reraise: Whether to raise ``error`` again after logging
        logger: Logger to use instead of this module's
    """
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    level = _SEVERITY_LEVELS[severity]

    (logger or globals()['logger']).log(
        level, f"Error in {context}: {error}", exc_info=severity is ErrorSeverity.CRITICAL
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """handle_error for configuration loading; the context gets a "config" prefix."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, exit_code: int = 1, **kwargs) -> None:
    """Log an error from the command-line layer and exit with ``exit_code``."""
    kwargs.setdefault('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", reraise=False, **kwargs)
    sys.exit(exit_code)
