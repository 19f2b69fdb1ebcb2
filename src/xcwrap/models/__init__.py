"""
Data models for the wrapper.

Configuration Models:
- Wrapper-wide defaults, supervision timings and external tool names

Request Models:
- The operation kinds and the immutable per-run request

Result Models:
- The terminal outcome of a run and the fixed exit-code contract
"""

from .config import WrapperConfig
from .outcome import Cancelled, ExitCodes, Failure, Outcome, SignalKind, Success, TimedOut
from .request import Operation, RunRequest

__all__ = [
    # Configuration
    "WrapperConfig",
    # Request
    "Operation",
    "RunRequest",
    # Results
    "Outcome",
    "Success",
    "Failure",
    "TimedOut",
    "Cancelled",
    "SignalKind",
    "ExitCodes",
]
