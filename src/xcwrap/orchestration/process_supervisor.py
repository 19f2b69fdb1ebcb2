"""
Process supervision for the orchestration module.

The ProcessSupervisor owns the lifecycle of the build-tool child:

    Running -> CompletedNormally(code) | TimedOut | Signalled(kind)

The child runs as the leader of a new process group with stdin discarded and
stdout/stderr merged into one pipe. That pipe is drained continuously into
the log sink while the supervisor waits for the exit, so a chatty child can
never block on a full pipe.

Every terminal state funnels into ``finish``, a one-shot teardown that
cancels the timers, stops the progress line, kills the whole process group,
closes the log sink and publishes the outcome. ``run`` then waits a short
grace delay and returns. The process group is always killed before the
wrapper exits, whichever trigger came first.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from ..models.outcome import Cancelled, Failure, Outcome, SignalKind, Success, TimedOut
from ..models.request import RunRequest
from ..system import ProcessTreeKiller, get_tree_killer
from ..validation import ErrorSeverity, SetupError, handle_error
from .command_builder import BuildCommand
from .log_manager import LogManager
from .progress import ProgressIndicator
from .shared_state import SupervisedRun, TimeoutConstants

logger = logging.getLogger(__name__)


class ProcessSupervisor:
    """
    Runs one build-tool invocation under a hard timeout.

    There is no idle detection: output arrival is recorded on the
    SupervisedRun but only the timeout and explicit termination requests
    end a run early.
    """

    def __init__(
        self,
        command: BuildCommand,
        request: RunRequest,
        tree_killer: Optional[ProcessTreeKiller] = None,
        progress: Optional[ProgressIndicator] = None,
        grace_delay: float = TimeoutConstants.TEARDOWN_GRACE_DELAY,
        drain_timeout: float = TimeoutConstants.OUTPUT_DRAIN_TIMEOUT,
        on_outcome: Optional[Callable[[Outcome], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.command = command
        self.request = request
        self.tree_killer = tree_killer or get_tree_killer()
        self.progress = progress
        self.grace_delay = grace_delay
        self.drain_timeout = drain_timeout
        self.on_outcome = on_outcome
        self.clock = clock

        self.state = SupervisedRun()
        self.log_manager = LogManager(self.state)

        self._outcome_future: Optional[asyncio.Future] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._completion_task: Optional[asyncio.Task] = None

    # --- Lifecycle ---

    async def run(self) -> Outcome:
        """
        Spawn the child, supervise it to a terminal state and tear down.

        Returns:
            The single outcome of the run, after the grace delay

        Raises:
            SetupError: If the log file cannot be opened or the child cannot start
        """
        try:
            await self.start()
            outcome = await self._get_outcome_future()
        except asyncio.CancelledError:
            # Embedding code cancelled us: the child must still not outlive the run.
            self.finish(Cancelled(SignalKind.INTERRUPT))
            await self._reap_background_tasks()
            raise

        await asyncio.sleep(self.grace_delay)
        await self._reap_background_tasks()
        return outcome

    async def start(self) -> None:
        """Open the log, spawn the child in its own process group and arm the timers."""
        loop = asyncio.get_running_loop()
        self._get_outcome_future()
        if self.state.teardown_started:
            return

        self.log_manager.open_log_file(self.request.log_file)

        logger.info(f"Starting {self.request.operation.value}: {self.command.command_line}")
        try:
            process = await asyncio.create_subprocess_shell(
                self.command.command_line,
                cwd=self.command.working_dir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                **self.tree_killer.spawn_options(),
            )
        except OSError as e:
            self.log_manager.close_log_file()
            raise SetupError(f"Failed to start '{self.command.argv[0]}': {e}") from e

        self.state.process = process
        self.state.pid = process.pid
        self.state.start_time = self.clock()
        logger.info(f"Build tool started with PID {process.pid} in {self.command.working_dir}")

        if self.state.teardown_started:
            # A signal arrived while the child was being spawned.
            self._kill_process_group()
            return

        self.state.timeout_handle = loop.call_later(self.request.timeout_seconds, self._on_timeout)
        self._reader_task = loop.create_task(self._drain_output(process.stdout))
        self._completion_task = loop.create_task(self._wait_for_exit())
        if self.progress is not None:
            self.progress.start(self.state.start_time)

    def request_termination(self, kind: SignalKind) -> None:
        """Stop the run because the wrapper itself was asked to stop."""
        logger.info(f"Termination requested ({kind.value})")
        self.finish(Cancelled(kind))

    def finish(self, outcome: Outcome) -> bool:
        """
        One-shot teardown.

        Returns:
            True if this call performed the teardown, False if it had already run
        """
        if self.state.teardown_started:
            logger.debug(f"Teardown already done, ignoring {outcome!r}")
            return False
        self.state.teardown_started = True
        self.state.outcome = outcome
        logger.debug(f"Tearing down with outcome {outcome!r}")

        for handle in (self.state.timeout_handle, self.state.backstop_handle):
            if handle is not None:
                handle.cancel()

        if self.progress is not None:
            self.progress.stop()

        self._kill_process_group()
        self.log_manager.close_log_file()

        if self.on_outcome is not None:
            try:
                self.on_outcome(outcome)
            except Exception as e:
                handle_error(
                    error=e,
                    context="reporting run outcome",
                    severity=ErrorSeverity.ERROR,
                    reraise=False,
                    logger=logger
                )

        future = self._get_outcome_future()
        if not future.done():
            future.set_result(outcome)
        return True

    # --- Event sources ---

    async def _drain_output(self, stream: asyncio.StreamReader) -> None:
        while True:
            chunk = await stream.read(TimeoutConstants.READ_CHUNK_SIZE)
            if not chunk:
                break
            self.state.last_output_time = self.clock()
            self.state.bytes_captured += len(chunk)
            self.log_manager.write(chunk)
        logger.debug(f"Output stream closed after {self.state.bytes_captured} bytes")

    async def _wait_for_exit(self) -> None:
        # process.wait() also waits for the pipes to close, which a surviving
        # descendant can hold open indefinitely. returncode is set on reaping.
        while self.state.process.returncode is None:
            await asyncio.sleep(TimeoutConstants.EXIT_POLL_INTERVAL)
        return_code = self.state.process.returncode
        logger.info(f"Build tool exited with code {return_code}")

        try:
            await asyncio.wait_for(asyncio.shield(self._reader_task), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            # A descendant outside our control still holds the pipe.
            logger.warning(f"Output still open {self.drain_timeout}s after exit, abandoning it")
            self._reader_task.cancel()
        except Exception as e:
            handle_error(
                error=e,
                context="draining build tool output",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )

        self.finish(self._classify_exit(return_code))

    def _on_timeout(self) -> None:
        self.state.timed_out = True
        logger.warning(f"Timed out after {self.request.timeout_seconds}s, killing process group {self.state.pid}")
        self._kill_process_group()
        self.state.backstop_handle = asyncio.get_running_loop().call_later(
            self.drain_timeout + TimeoutConstants.TIMEOUT_BACKSTOP_MARGIN,
            self.finish,
            TimedOut(self.request.timeout_seconds),
        )

    # --- Helpers ---

    def _classify_exit(self, return_code: int) -> Outcome:
        if self.state.timed_out:
            return TimedOut(self.request.timeout_seconds)
        elapsed = int(self.clock() - self.state.start_time)
        if return_code == 0:
            return Success(elapsed)
        if return_code < 0:
            # Killed by a signal we did not send; follow the shell convention.
            return Failure(128 - return_code, elapsed)
        return Failure(return_code, elapsed)

    def _kill_process_group(self) -> None:
        if self.state.pid is None:
            return
        try:
            self.tree_killer.kill_tree(self.state.pid)
        except Exception as e:
            handle_error(
                error=e,
                context=f"killing process group {self.state.pid}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )

    def _get_outcome_future(self) -> asyncio.Future:
        if self._outcome_future is None:
            self._outcome_future = asyncio.get_running_loop().create_future()
        return self._outcome_future

    async def _reap_background_tasks(self) -> None:
        tasks = [t for t in (self._completion_task, self._reader_task) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
