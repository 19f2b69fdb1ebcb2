"""
Elapsed-time progress line shown while the build tool runs.
"""

import asyncio
import logging
import sys
import time
from typing import Callable, IO, Optional

from ..models.request import Operation
from .shared_state import TimeoutConstants

logger = logging.getLogger(__name__)


class ProgressIndicator:
    """
    Rewrites one status line every ``interval`` seconds.

    Purely cosmetic: nothing in the supervisor depends on it, and a disabled
    indicator does nothing at all.
    """

    def __init__(
        self,
        operation: Operation,
        interval: float = TimeoutConstants.PROGRESS_INTERVAL,
        enabled: bool = True,
        stream: Optional[IO[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.operation = operation
        self.interval = interval
        self.enabled = enabled
        self._stream = stream
        self.clock = clock
        self._task: Optional[asyncio.Task] = None
        self._last_width = 0

    @property
    def stream(self) -> IO[str]:
        return self._stream or sys.stdout

    def render(self, elapsed_seconds: int) -> str:
        return f"{self.operation.progress_verb}... {elapsed_seconds}s elapsed"

    def start(self, start_time: float) -> None:
        if not self.enabled or self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._tick(start_time))

    async def _tick(self, start_time: float) -> None:
        while True:
            await asyncio.sleep(self.interval)
            line = self.render(int(self.clock() - start_time))
            self._last_width = max(self._last_width, len(line))
            self.stream.write(f"\r{line}")
            self.stream.flush()

    def stop(self) -> None:
        """Stop ticking and clear the status line."""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        if self._last_width:
            self.stream.write("\r" + " " * self._last_width + "\r")
            self.stream.flush()
