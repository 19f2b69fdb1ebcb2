"""
Validation and error handling for the xcwrap package.

This module provides input validation, the setup-error taxonomy and
error handling helpers with consistent error reporting across the
application.
"""

from .exceptions import (
    ErrorSeverity,
    InvalidDevice,
    NoDescriptorFound,
    SetupError,
    ToolUnavailable,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

from .validators import (
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ValidationError",
    "SetupError",
    "NoDescriptorFound",
    "InvalidDevice",
    "ToolUnavailable",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_string_list",
]
