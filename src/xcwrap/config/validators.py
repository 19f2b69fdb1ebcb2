"""
Configuration validation utilities.

This module turns the raw ``[wrapper]`` table into a validated
WrapperConfig, filling in defaults for anything left out.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import WrapperConfig
from ..validation import (
    ValidationError,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)

logger = logging.getLogger(__name__)


def validate_wrapper_config(wrapper_data: Dict[str, Any]) -> WrapperConfig:
    """
    Validate and create a WrapperConfig from raw configuration data.

    Args:
        wrapper_data: Raw ``[wrapper]`` table from TOML

    Returns:
        Validated WrapperConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = WrapperConfig()

    defaults_settings = wrapper_data.get("defaults", {})
    supervision_settings = wrapper_data.get("supervision", {})
    tools_settings = wrapper_data.get("tools", {})

    for section_name, section in (
        ("defaults", defaults_settings),
        ("supervision", supervision_settings),
        ("tools", tools_settings),
    ):
        if not isinstance(section, dict):
            raise ValidationError(
                f"wrapper.{section_name} must be a table",
                field_name=f"wrapper.{section_name}",
                value=section,
            )

    default_device = validate_non_empty_string(
        defaults_settings.get("device", defaults.default_device),
        field_name="wrapper.defaults.device",
    )

    timeout_seconds = validate_positive_integer(
        defaults_settings.get("timeout_seconds", defaults.timeout_seconds),
        min_value=1,
        field_name="wrapper.defaults.timeout_seconds",
    )

    test_timeout_seconds = validate_positive_integer(
        defaults_settings.get("test_timeout_seconds", defaults.test_timeout_seconds),
        min_value=1,
        field_name="wrapper.defaults.test_timeout_seconds",
    )

    # An empty string keeps the platform temp-dir default.
    log_file_setting = defaults_settings.get("log_file", "")
    if not isinstance(log_file_setting, str):
        raise ValidationError(
            "wrapper.defaults.log_file must be a string",
            field_name="wrapper.defaults.log_file",
            value=log_file_setting,
        )
    log_file = Path(log_file_setting).expanduser() if log_file_setting.strip() else defaults.log_file

    grace_delay_seconds = validate_positive_float(
        supervision_settings.get("grace_delay_seconds", defaults.grace_delay_seconds),
        min_value=0.0,
        max_value=10.0,
        field_name="wrapper.supervision.grace_delay_seconds",
    )

    progress_interval_seconds = validate_positive_float(
        supervision_settings.get("progress_interval_seconds", defaults.progress_interval_seconds),
        min_value=0.01,
        max_value=60.0,
        field_name="wrapper.supervision.progress_interval_seconds",
    )

    output_drain_timeout_seconds = validate_positive_float(
        supervision_settings.get("output_drain_timeout_seconds", defaults.output_drain_timeout_seconds),
        min_value=0.0,
        max_value=60.0,
        field_name="wrapper.supervision.output_drain_timeout_seconds",
    )

    build_tool = validate_non_empty_string(
        tools_settings.get("build_tool", defaults.build_tool),
        field_name="wrapper.tools.build_tool",
    )

    device_list_command = validate_string_list(
        tools_settings.get("device_list_command", defaults.device_list_command),
        field_name="wrapper.tools.device_list_command",
    )

    simulator_platform = validate_non_empty_string(
        tools_settings.get("simulator_platform", defaults.simulator_platform),
        field_name="wrapper.tools.simulator_platform",
    )

    return WrapperConfig(
        default_device=default_device,
        timeout_seconds=timeout_seconds,
        test_timeout_seconds=test_timeout_seconds,
        log_file=log_file,
        grace_delay_seconds=grace_delay_seconds,
        progress_interval_seconds=progress_interval_seconds,
        output_drain_timeout_seconds=output_drain_timeout_seconds,
        build_tool=build_tool,
        device_list_command=device_list_command,
        simulator_platform=simulator_platform,
    )
