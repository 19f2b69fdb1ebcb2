"""
Simulator device validation.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..system import run_command
from ..validation import InvalidDevice, ToolUnavailable

logger = logging.getLogger(__name__)


class DeviceValidator:
    """
    Confirms that a device name appears in the simulator listing.

    The listing is treated as opaque text; a plain substring match decides.
    """

    def __init__(
        self,
        list_command: List[str],
        runner: Optional[Callable[[List[str]], Tuple[int, str, str]]] = None,
    ):
        self.list_command = list(list_command)
        self.runner = runner or run_command

    def validate(self, device_name: str) -> str:
        """
        Check ``device_name`` against the enumeration output.

        Returns:
            The full enumeration output

        Raises:
            ToolUnavailable: If the listing command cannot be run or fails
            InvalidDevice: If the device name is not in the listing
        """
        command_str = " ".join(self.list_command)
        return_code, stdout, stderr = self.runner(self.list_command)
        if return_code != 0:
            reason = stderr.strip() or f"exit code {return_code}"
            raise ToolUnavailable(command_str, reason)

        if device_name not in stdout:
            raise InvalidDevice(device_name, stdout)

        logger.debug(f"Device '{device_name}' found via '{command_str}'")
        return stdout
