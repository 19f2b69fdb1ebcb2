"""
Orchestration module for supervised build-tool runs.

Components:
- BuildRunner: Main coordinator of one wrapper invocation
- DeviceValidator: Simulator device lookup
- build_command / find_build_descriptor: Command construction
- ProcessSupervisor: Child lifecycle, timeout and teardown
- SignalBridge: SIGINT/SIGTERM forwarding
- ProgressIndicator: Elapsed-time status line
- Reporter: Prologue, setup errors and final summary
- LogManager: Build log sink
"""

from .build_runner import BuildRunner
from .command_builder import BuildCommand, BuildDescriptor, build_command, find_build_descriptor
from .device_validator import DeviceValidator
from .log_manager import LogManager, read_log_text
from .process_supervisor import ProcessSupervisor
from .progress import ProgressIndicator
from .reporter import Reporter, extract_error_line
from .shared_state import SupervisedRun, TimeoutConstants
from .signal_handler import SignalBridge

__all__ = [
    "BuildRunner",
    "BuildCommand",
    "BuildDescriptor",
    "build_command",
    "find_build_descriptor",
    "DeviceValidator",
    "LogManager",
    "read_log_text",
    "ProcessSupervisor",
    "ProgressIndicator",
    "Reporter",
    "extract_error_line",
    "SupervisedRun",
    "TimeoutConstants",
    "SignalBridge",
]
