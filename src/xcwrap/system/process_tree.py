"""
Process tree termination.

The supervised child is started as the leader of its own process group so
that the whole subtree can be killed in one step. Platforms without POSIX
process groups fall back to walking the tree with psutil.

Both implementations are idempotent: killing a tree that is already gone is
not an error.
"""

import logging
import os
import signal
import subprocess
from typing import Any, Dict, List

import psutil

logger = logging.getLogger(__name__)


class ProcessTreeKiller:
    """Capability to forcefully terminate a spawned process and its descendants."""

    def spawn_options(self) -> Dict[str, Any]:
        """Extra keyword arguments for the subprocess call that spawns the child."""
        return {}

    def kill_tree(self, pid: int) -> bool:
        """
        Kill the process rooted at ``pid`` and all of its descendants.

        Returns:
            True if at least one process was signalled
        """
        raise NotImplementedError

    @staticmethod
    def _descendants(pid: int) -> List[psutil.Process]:
        try:
            return psutil.Process(pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            return []
        except psutil.AccessDenied:
            logger.debug(f"Access denied listing children of PID {pid}")
            return []

    @staticmethod
    def _kill_processes(processes: List[psutil.Process]) -> int:
        killed = 0
        for process in processes:
            try:
                process.kill()
                killed += 1
                logger.debug(f"Sent SIGKILL to PID {process.pid}")
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                logger.warning(f"Access denied killing PID {process.pid}")
        return killed


class ProcessGroupKiller(ProcessTreeKiller):
    """
    POSIX implementation: the child leads a new session, so its PID is also
    its process group id and ``killpg`` reaches every member at once.
    """

    def spawn_options(self) -> Dict[str, Any]:
        return {"start_new_session": True}

    def kill_tree(self, pid: int) -> bool:
        if pid <= 0:
            logger.warning(f"Invalid PID {pid}, skipping termination")
            return False

        # Descendants that moved to another group would survive killpg.
        # They have to be found before the leader dies and they get reparented.
        escaped = [p for p in self._descendants(pid) if self._left_group(p, pid)]

        signalled = False
        try:
            os.killpg(pid, signal.SIGKILL)
            signalled = True
            logger.debug(f"Sent SIGKILL to process group {pid}")
        except ProcessLookupError:
            logger.debug(f"Process group {pid} already gone")
        except PermissionError:
            logger.warning(f"No permission to kill process group {pid}")

        if escaped:
            logger.info(f"Killing {len(escaped)} descendant(s) that left process group {pid}")
            signalled = self._kill_processes(escaped) > 0 or signalled
        return signalled

    @staticmethod
    def _left_group(process: psutil.Process, pgid: int) -> bool:
        try:
            return os.getpgid(process.pid) != pgid
        except (ProcessLookupError, PermissionError):
            return False


class PsutilTreeKiller(ProcessTreeKiller):
    """Fallback for platforms lacking POSIX process groups."""

    def spawn_options(self) -> Dict[str, Any]:
        flags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
        return {"creationflags": flags} if flags else {}

    def kill_tree(self, pid: int) -> bool:
        if pid <= 0:
            logger.warning(f"Invalid PID {pid}, skipping termination")
            return False
        try:
            root = psutil.Process(pid)
        except psutil.NoSuchProcess:
            logger.debug(f"Process {pid} already terminated")
            return False

        processes = self._descendants(pid) + [root]
        killed = self._kill_processes(processes)
        logger.debug(f"Killed {killed} process(es) in tree rooted at {pid}")
        return killed > 0


def get_tree_killer() -> ProcessTreeKiller:
    """Return the process tree killer suited to the current platform."""
    if hasattr(os, "killpg"):
        return ProcessGroupKiller()
    return PsutilTreeKiller()
