"""
User-facing reporting: run prologue, setup errors and the final summary.

On a failed build the log is read back and the first ``error:`` line is
shown. This is a deliberately simple heuristic; warnings that happen to
contain ``error:`` are picked up just the same.
"""

import logging
import re
import sys
from pathlib import Path
from typing import IO, Optional

from ..models.outcome import Cancelled, Failure, Outcome, SignalKind, Success, TimedOut
from ..models.request import RunRequest
from ..validation import InvalidDevice, SetupError
from .log_manager import read_log_text

logger = logging.getLogger(__name__)

ERROR_LINE_PATTERN = re.compile(r"error:.*$", re.MULTILINE)
DEVICE_NOT_FOUND_MARKER = "Unable to find a device"
RULE = "-" * 40
COMMAND_PREVIEW_LENGTH = 80


def extract_error_line(log_text: str) -> Optional[str]:
    """Return the first ``error:`` match (up to end of line), or None."""
    match = ERROR_LINE_PATTERN.search(log_text)
    if match is None:
        return None
    return match.group(0).rstrip("\r")


class Reporter:
    """
    Writes everything the caller of the wrapper sees.

    In quiet mode only the final summary and errors are printed.
    """

    def __init__(self, quiet: bool = False, out: Optional[IO[str]] = None,
                 err: Optional[IO[str]] = None):
        self.quiet = quiet
        self._out = out
        self._err = err

    @property
    def out(self) -> IO[str]:
        return self._out or sys.stdout

    @property
    def err(self) -> IO[str]:
        return self._err or sys.stderr

    def _print(self, message: str = "", error: bool = False) -> None:
        stream = self.err if error else self.out
        stream.write(message + "\n")
        stream.flush()

    # --- Before the run ---

    def report_prologue(self, request: RunRequest) -> None:
        if self.quiet:
            return
        self._print("Xcode Build Wrapper")
        self._print(RULE)
        self._print(f"Project: {request.target_dir}")
        self._print(f"Scheme:  {request.scheme}")
        self._print(f"Action:  {request.operation.value}")
        if request.device:
            self._print(f"Device:  {request.device}")
        self._print(f"Timeout: {request.timeout_seconds}s")
        self._print(f"Log:     {request.log_file}")
        self._print()

    def report_device_found(self, device_name: str) -> None:
        if not self.quiet:
            self._print(f'Device "{device_name}" found')

    def report_start(self, request: RunRequest, command_line: str) -> None:
        if self.quiet:
            return
        preview = command_line
        if len(preview) > COMMAND_PREVIEW_LENGTH:
            preview = preview[:COMMAND_PREVIEW_LENGTH] + "..."
        self._print()
        self._print(f"Starting {request.operation.value}...")
        self._print(f"   {preview}")
        self._print()

    def report_setup_error(self, error: SetupError) -> None:
        self._print(f"[ERROR] {error}", error=True)
        if isinstance(error, InvalidDevice):
            self._print("", error=True)
            self._print("Available devices:", error=True)
            self._print(error.available_devices.rstrip("\n"), error=True)

    # --- After the run ---

    def report_outcome(self, outcome: Outcome, request: RunRequest) -> None:
        """Print the summary for ``outcome``; never raises on log problems."""
        title = request.operation.title
        log_file = request.log_file

        if isinstance(outcome, Success):
            self._banner(f"[SUCCESS] {title} SUCCEEDED ({outcome.elapsed_seconds}s)")
            self._print(f"Full log: {log_file}")
        elif isinstance(outcome, Failure):
            self._banner(f"[FAILURE] {title} FAILED (exit code {outcome.exit_code})", error=True)
            self._report_diagnostics(Path(log_file))
            self._print("", error=True)
            self._print(f"Full log: {log_file}", error=True)
        elif isinstance(outcome, TimedOut):
            self._banner(f"[TIMEOUT] {title} TIMED OUT ({outcome.timeout_seconds}s)", error=True)
            self._print(f"Full log: {log_file}", error=True)
        elif isinstance(outcome, Cancelled):
            if outcome.signal_kind is SignalKind.INTERRUPT:
                message = f"{title.capitalize()} cancelled by user"
            else:
                message = f"{title.capitalize()} terminated"
            self._print("", error=True)
            self._print(f"[CANCELLED] {message}", error=True)
            self._print(f"Full log: {log_file}", error=True)
        else:
            raise TypeError(f"Unknown outcome: {outcome!r}")

    def _banner(self, headline: str, error: bool = False) -> None:
        self._print("", error=error)
        self._print(RULE, error=error)
        self._print(headline, error=error)
        self._print(RULE, error=error)

    def _report_diagnostics(self, log_file: Path) -> None:
        log_text = read_log_text(log_file)
        if log_text is None:
            return

        error_line = extract_error_line(log_text)
        if error_line:
            self._print("", error=True)
            self._print(f"Error: {error_line}", error=True)

        if DEVICE_NOT_FOUND_MARKER in log_text:
            self._print("", error=True)
            self._print("Tip: Device not found. List available devices with:", error=True)
            self._print("   xcrun simctl list devices", error=True)
