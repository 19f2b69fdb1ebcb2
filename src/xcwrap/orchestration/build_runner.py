"""
BuildRunner: coordinates one wrapper invocation.

Setup (descriptor discovery, command construction, device validation) runs
first and maps every failure to exit status 1 without spawning anything.
The ProcessSupervisor then runs the build tool with the SignalBridge and
ProgressIndicator attached, and the Reporter prints the summary from inside
the supervisor's teardown.
"""

import asyncio
import logging
from typing import IO, Optional

from ..models.config import WrapperConfig
from ..models.outcome import ExitCodes, Outcome
from ..models.request import RunRequest
from ..system import ProcessTreeKiller
from ..validation import SetupError
from .command_builder import BuildCommand, build_command
from .device_validator import DeviceValidator
from .process_supervisor import ProcessSupervisor
from .progress import ProgressIndicator
from .reporter import Reporter
from .signal_handler import SignalBridge

logger = logging.getLogger(__name__)


class BuildRunner:
    """
    Runs a RunRequest from setup to exit status.

    Collaborators can be injected for tests; by default they are built from
    the WrapperConfig.
    """

    def __init__(
        self,
        request: RunRequest,
        config: WrapperConfig,
        device_validator: Optional[DeviceValidator] = None,
        tree_killer: Optional[ProcessTreeKiller] = None,
        out: Optional[IO[str]] = None,
        err: Optional[IO[str]] = None,
    ):
        self.request = request
        self.config = config
        self.device_validator = device_validator or DeviceValidator(config.device_list_command)
        self.tree_killer = tree_killer
        self.reporter = Reporter(quiet=request.quiet, out=out, err=err)
        self.progress = ProgressIndicator(
            request.operation,
            interval=config.progress_interval_seconds,
            enabled=not request.quiet,
            stream=out,
        )
        self.supervisor: Optional[ProcessSupervisor] = None
        self.signal_bridge: Optional[SignalBridge] = None

    def run(self) -> int:
        """Execute the whole run on a fresh event loop and return the exit status."""
        return asyncio.run(self.run_async())

    async def run_async(self) -> int:
        self.reporter.report_prologue(self.request)

        try:
            command = await self.prepare()
        except SetupError as e:
            logger.debug(f"Setup failed: {e}")
            self.reporter.report_setup_error(e)
            return ExitCodes.SETUP_ERROR

        self.reporter.report_start(self.request, command.command_line)
        outcome = await self.supervise(command)
        if outcome is None:
            return ExitCodes.SETUP_ERROR
        return outcome.exit_code

    async def prepare(self) -> BuildCommand:
        """
        Build the command and validate the destination device.

        Raises:
            SetupError: On any problem detected before the build tool starts
        """
        command = build_command(self.request, self.config)
        logger.debug(f"Command: {command.command_line}")

        if self.request.operation.uses_destination:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.device_validator.validate, self.request.device)
            self.reporter.report_device_found(self.request.device)

        return command

    async def supervise(self, command: BuildCommand) -> Optional[Outcome]:
        """
        Run the supervised child with signal forwarding installed.

        Returns:
            The outcome, or None if the child could not be started
        """
        self.supervisor = ProcessSupervisor(
            command,
            self.request,
            tree_killer=self.tree_killer,
            progress=self.progress,
            grace_delay=self.config.grace_delay_seconds,
            drain_timeout=self.config.output_drain_timeout_seconds,
            on_outcome=self._on_outcome,
        )
        self.signal_bridge = SignalBridge(self.supervisor.request_termination)
        self.signal_bridge.install()
        try:
            return await self.supervisor.run()
        except SetupError as e:
            self.reporter.report_setup_error(e)
            return None
        finally:
            self.signal_bridge.uninstall()

    def _on_outcome(self, outcome: Outcome) -> None:
        # Teardown has begun: later signals must not trigger anything.
        if self.signal_bridge is not None:
            self.signal_bridge.unsubscribe()
        self.reporter.report_outcome(outcome, self.request)
