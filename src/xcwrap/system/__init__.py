"""
System interaction utilities.

- Command execution with proper error handling and logging
- Process tree termination for the supervised build tool
"""

from .commands import run_command
from .process_tree import (
    ProcessGroupKiller,
    ProcessTreeKiller,
    PsutilTreeKiller,
    get_tree_killer,
)

__all__ = [
    # Commands
    "run_command",
    # Process trees
    "ProcessTreeKiller",
    "ProcessGroupKiller",
    "PsutilTreeKiller",
    "get_tree_killer",
]
