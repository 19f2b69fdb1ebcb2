"""
Unit tests for the ProcessSupervisor teardown latch and exit classification.

These tests drive the supervisor directly without spawning a child.
"""

import asyncio
from unittest.mock import Mock

import pytest

from xcwrap.models.outcome import Cancelled, Failure, SignalKind, Success, TimedOut
from xcwrap.orchestration.process_supervisor import ProcessSupervisor
from xcwrap.system import ProcessTreeKiller


class RecordingKiller(ProcessTreeKiller):
    """Tree killer that only records which PIDs it was asked to kill."""

    def __init__(self, fail=False):
        self.killed = []
        self.fail = fail

    def kill_tree(self, pid):
        self.killed.append(pid)
        if self.fail:
            raise OSError("kill failed")
        return True


def _supervisor(make_request, test_utils, temp_dir, **kwargs):
    command = test_utils.make_command("true", temp_dir)
    kwargs.setdefault("tree_killer", RecordingKiller())
    return ProcessSupervisor(command, make_request(), **kwargs)


@pytest.mark.unit
class TestTeardownLatch:
    """Test cases for the one-shot finish()."""

    @pytest.mark.asyncio
    async def test_first_outcome_wins(self, make_request, test_utils, temp_dir):
        outcomes = []
        supervisor = _supervisor(make_request, test_utils, temp_dir, on_outcome=outcomes.append)
        supervisor.state.pid = 4242

        assert supervisor.finish(Cancelled(SignalKind.INTERRUPT)) is True
        assert supervisor.finish(Success(elapsed_seconds=1)) is False
        assert supervisor.finish(TimedOut(timeout_seconds=30)) is False

        assert outcomes == [Cancelled(SignalKind.INTERRUPT)]
        assert supervisor.state.outcome == Cancelled(SignalKind.INTERRUPT)
        assert supervisor.tree_killer.killed == [4242]
        assert await supervisor._get_outcome_future() == Cancelled(SignalKind.INTERRUPT)

    @pytest.mark.asyncio
    async def test_cancels_timers_and_stops_progress(self, make_request, test_utils, temp_dir):
        progress = Mock()
        supervisor = _supervisor(make_request, test_utils, temp_dir, progress=progress)
        loop = asyncio.get_running_loop()
        supervisor.state.timeout_handle = loop.call_later(60, Mock())
        supervisor.state.backstop_handle = loop.call_later(60, Mock())

        supervisor.finish(Success(elapsed_seconds=0))

        assert supervisor.state.timeout_handle.cancelled()
        assert supervisor.state.backstop_handle.cancelled()
        progress.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_kill_without_child(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        supervisor.finish(Cancelled(SignalKind.TERMINATE))
        assert supervisor.tree_killer.killed == []

    @pytest.mark.asyncio
    async def test_kill_and_report_errors_do_not_break_teardown(self, make_request, test_utils, temp_dir):
        on_outcome = Mock(side_effect=RuntimeError("stdout closed"))
        supervisor = _supervisor(
            make_request, test_utils, temp_dir,
            tree_killer=RecordingKiller(fail=True),
            on_outcome=on_outcome,
        )
        supervisor.state.pid = 4242

        assert supervisor.finish(Failure(child_exit_code=65, elapsed_seconds=2)) is True

        on_outcome.assert_called_once()
        assert await supervisor._get_outcome_future() == Failure(65, 2)

    @pytest.mark.asyncio
    async def test_closes_log_sink(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        supervisor.log_manager.open_log_file(temp_dir / "logs" / "build.log")
        assert supervisor.log_manager.is_open

        supervisor.finish(Success(elapsed_seconds=0))

        assert not supervisor.log_manager.is_open
        supervisor.log_manager.write(b"late output")
        assert (temp_dir / "logs" / "build.log").read_bytes() == b""

    @pytest.mark.asyncio
    async def test_request_termination(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        supervisor.request_termination(SignalKind.TERMINATE)
        assert supervisor.state.outcome == Cancelled(SignalKind.TERMINATE)

    @pytest.mark.asyncio
    async def test_start_after_teardown_spawns_nothing(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        supervisor.request_termination(SignalKind.INTERRUPT)

        await supervisor.start()

        assert supervisor.state.process is None
        assert not supervisor.log_manager.is_open


@pytest.mark.unit
class TestExitClassification:
    """Test cases for mapping a child return code to an outcome."""

    def _classify(self, supervisor, return_code, now=107.9):
        supervisor.clock = lambda: now
        supervisor.state.start_time = 100.0
        return supervisor._classify_exit(return_code)

    def test_success(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        assert self._classify(supervisor, 0) == Success(elapsed_seconds=7)

    def test_failure_passthrough(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        assert self._classify(supervisor, 65) == Failure(child_exit_code=65, elapsed_seconds=7)

    def test_killed_by_signal(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        assert self._classify(supervisor, -9).exit_code == 137

    def test_timeout_overrides_exit_code(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir)
        supervisor.state.timed_out = True
        assert self._classify(supervisor, 0) == TimedOut(timeout_seconds=30)


@pytest.mark.unit
class TestExitDetection:
    """Test cases for noticing the child's exit while its output pipe stays open."""

    def _running(self, supervisor):
        process = Mock(returncode=None, pid=4242)
        # Process.wait() only returns once the pipes are closed.
        process.wait = Mock(side_effect=AssertionError("waited on the pipes"))
        supervisor.state.process = process
        supervisor.state.pid = process.pid
        supervisor.state.start_time = supervisor.clock()
        return process

    @pytest.mark.asyncio
    async def test_exit_seen_while_pipe_held_open(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir, drain_timeout=0.05)
        process = self._running(supervisor)
        supervisor._reader_task = asyncio.create_task(asyncio.sleep(3600))

        waiter = asyncio.create_task(supervisor._wait_for_exit())
        await asyncio.sleep(0.1)
        assert not waiter.done()

        process.returncode = 0
        outcome = await asyncio.wait_for(supervisor._get_outcome_future(), timeout=2)
        await waiter
        await asyncio.gather(supervisor._reader_task, return_exceptions=True)

        assert isinstance(outcome, Success)
        assert supervisor._reader_task.cancelled()
        assert supervisor.tree_killer.killed == [4242]
        process.wait.assert_not_called()

    @pytest.mark.asyncio
    async def test_output_finishing_within_drain_window_is_kept(self, make_request, test_utils, temp_dir):
        supervisor = _supervisor(make_request, test_utils, temp_dir, drain_timeout=1.0)
        process = self._running(supervisor)
        process.returncode = 3
        supervisor._reader_task = asyncio.create_task(asyncio.sleep(0.05))

        await supervisor._wait_for_exit()

        assert supervisor.state.outcome == Failure(child_exit_code=3, elapsed_seconds=0)
        assert supervisor._reader_task.done()
        assert not supervisor._reader_task.cancelled()
