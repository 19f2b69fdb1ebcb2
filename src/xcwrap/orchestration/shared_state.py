"""
Shared data structures for the orchestration module.

This module defines the mutable runtime record of a supervised run and the
timing constants used across the orchestration components.
"""

import asyncio
from dataclasses import dataclass
from typing import IO, Optional

from ..models.outcome import Outcome


@dataclass
class SupervisedRun:
    """
    Runtime state of one supervised build-tool process.

    Owned exclusively by the ProcessSupervisor: created when the child is
    spawned and discarded once the wrapper has torn down.
    """
    # Child process handle; its PID doubles as the process group id.
    process: Optional[asyncio.subprocess.Process] = None
    pid: Optional[int] = None

    # Monotonic timestamps.
    start_time: float = 0.0
    last_output_time: Optional[float] = None
    bytes_captured: int = 0

    # Once set, overrides whatever exit code the child reports.
    timed_out: bool = False
    timeout_handle: Optional[asyncio.TimerHandle] = None
    backstop_handle: Optional[asyncio.TimerHandle] = None

    # Log sink, written only by the supervisor.
    log_sink: Optional[IO[bytes]] = None

    # One-shot teardown latch and its result.
    teardown_started: bool = False
    outcome: Optional[Outcome] = None


class TimeoutConstants:
    """
    Centralized timing configuration.

    The configurable values are defaults for WrapperConfig; the rest are
    internal.
    """
    # Pause between teardown and returning the exit status.
    TEARDOWN_GRACE_DELAY = 0.1
    PROGRESS_INTERVAL = 1.0
    # How long output may keep arriving after the child has exited.
    OUTPUT_DRAIN_TIMEOUT = 2.0
    # Extra slack before a timed-out run is finished without its completion handler.
    TIMEOUT_BACKSTOP_MARGIN = 0.5
    # How often the child's return code is checked while it runs.
    EXIT_POLL_INTERVAL = 0.05

    READ_CHUNK_SIZE = 64 * 1024
