"""
Request data models.

This module contains the immutable description of a single wrapper run:
which operation to perform, against which build descriptor, and under
which limits.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Operation(str, Enum):
    """The action requested from the build tool."""

    BUILD = "build"
    TEST = "test"
    ARCHIVE = "archive"
    CLEAN = "clean"

    @classmethod
    def names(cls):
        return [op.value for op in cls]

    @property
    def uses_destination(self) -> bool:
        """Only build and test run against a simulator destination."""
        return self in (Operation.BUILD, Operation.TEST)

    @property
    def progress_verb(self) -> str:
        return {
            Operation.BUILD: "Building",
            Operation.TEST: "Testing",
            Operation.ARCHIVE: "Archiving",
            Operation.CLEAN: "Cleaning",
        }[self]

    @property
    def title(self) -> str:
        return self.value.upper()


@dataclass(frozen=True)
class RunRequest:
    """
    Immutable snapshot of the resolved options for one run.

    The destination device is only kept for operations that use it, and an
    archive request must carry an archive path.
    """

    # Directory holding the workspace or project.
    target_dir: Path
    # Scheme (or target) name passed through to the build tool.
    scheme: str
    operation: Operation
    # Hard limit for the supervised child, in whole seconds.
    timeout_seconds: int
    # Where the combined child output is written.
    log_file: Path
    device: Optional[str] = None
    archive_path: Optional[Path] = None
    quiet: bool = False

    def __post_init__(self):
        if not isinstance(self.operation, Operation):
            raise ValueError(f"operation must be one of {Operation.names()}, got {self.operation}")
        if isinstance(self.timeout_seconds, bool) or not isinstance(self.timeout_seconds, int) \
                or self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be a positive integer, got {self.timeout_seconds}")
        if self.operation is Operation.ARCHIVE and not self.archive_path:
            raise ValueError("archive operation requires an archive path")
        if not self.operation.uses_destination:
            object.__setattr__(self, "device", None)
