"""
xcwrap: a supervising wrapper around xcodebuild.

The wrapper launches one build-tool invocation, bounds it with a hard
timeout, captures its combined output to a log, shows progress, extracts a
readable error on failure and always exits promptly without leaving any of
the build tool's processes behind.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Requests, outcomes and the exit-code contract
- validation: Input validation and error handling
- system: External commands and process tree termination
- orchestration: Device validation, command construction, supervision,
  signal forwarding, progress and reporting
- cli: Command-line interface

Usage:
    From command line:
        xcwrap --project PATH --scheme NAME [options]

    Programmatically:
        from xcwrap import BuildRunner, RunRequest, get_config
        exit_code = BuildRunner(request, get_config()).run()
"""

from .config import clear_config_cache, get_config, set_config_path
from .orchestration import BuildRunner, ProcessSupervisor
from .cli import main_cli

from .models import (
    Cancelled,
    ExitCodes,
    Failure,
    Operation,
    Outcome,
    RunRequest,
    SignalKind,
    Success,
    TimedOut,
    WrapperConfig,
)

from .validation import (
    InvalidDevice,
    NoDescriptorFound,
    SetupError,
    ToolUnavailable,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "BuildRunner",
    "ProcessSupervisor",
    "main_cli",
    # Models
    "WrapperConfig",
    "Operation",
    "RunRequest",
    "Outcome",
    "Success",
    "Failure",
    "TimedOut",
    "Cancelled",
    "SignalKind",
    "ExitCodes",
    # Errors
    "ValidationError",
    "SetupError",
    "NoDescriptorFound",
    "InvalidDevice",
    "ToolUnavailable",
]
