"""
Terminal results of a supervised run and the exit-code contract.

Exactly one Outcome is produced per run. Each variant knows the exit status
the wrapper must leave with.
"""

from dataclasses import dataclass
from enum import Enum


class ExitCodes:
    """
    Fixed exit statuses of the wrapper.

    Build-tool failures pass the child's own status through.
    """
    SUCCESS = 0
    SETUP_ERROR = 1
    TIMEOUT = 124
    INTERRUPT = 130
    TERMINATE = 143


class SignalKind(Enum):
    """External cancellation requests the wrapper reacts to."""

    INTERRUPT = "interrupt"
    TERMINATE = "terminate"

    @property
    def exit_code(self) -> int:
        if self is SignalKind.INTERRUPT:
            return ExitCodes.INTERRUPT
        return ExitCodes.TERMINATE


class Outcome:
    """Base class for the four terminal results."""

    @property
    def exit_code(self) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(Outcome):
    elapsed_seconds: int

    @property
    def exit_code(self) -> int:
        return ExitCodes.SUCCESS


@dataclass(frozen=True)
class Failure(Outcome):
    # Child status, already normalised to a non-negative value.
    child_exit_code: int
    elapsed_seconds: int

    @property
    def exit_code(self) -> int:
        return self.child_exit_code


@dataclass(frozen=True)
class TimedOut(Outcome):
    timeout_seconds: int

    @property
    def exit_code(self) -> int:
        return ExitCodes.TIMEOUT


@dataclass(frozen=True)
class Cancelled(Outcome):
    signal_kind: SignalKind

    @property
    def exit_code(self) -> int:
        return self.signal_kind.exit_code
