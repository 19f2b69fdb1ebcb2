"""
Configuration data models.

This module contains the configuration structure loaded from `config.toml`.
Every field has a default so the wrapper works without a config file.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


def default_log_file() -> Path:
    return Path(tempfile.gettempdir()) / "xcode-build.log"


def default_device_list_command() -> List[str]:
    return ["xcrun", "simctl", "list", "devices", "available"]


@dataclass
class WrapperConfig:
    """
    Global wrapper behaviour, loaded from `config.toml`.
    """

    # [wrapper.defaults]
    default_device: str = "iPhone 16 Pro"
    timeout_seconds: int = 300
    test_timeout_seconds: int = 600
    log_file: Path = field(default_factory=default_log_file)

    # [wrapper.supervision]
    # Pause between teardown and process exit so OS cleanup can settle.
    grace_delay_seconds: float = 0.1
    progress_interval_seconds: float = 1.0
    # How long a finished child may keep its output pipe open.
    output_drain_timeout_seconds: float = 2.0

    # [wrapper.tools]
    build_tool: str = "xcodebuild"
    device_list_command: List[str] = field(default_factory=default_device_list_command)
    simulator_platform: str = "iOS Simulator"
