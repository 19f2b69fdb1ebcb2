"""
Pytest configuration and shared fixtures for the xcwrap test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the project.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def project_dir(temp_dir):
    """A target directory holding a single Xcode project bundle."""
    directory = temp_dir / "MyApp"
    directory.mkdir()
    (directory / "MyApp.xcodeproj").mkdir()
    return directory


@pytest.fixture
def wrapper_config(temp_dir):
    """A WrapperConfig with short timings suitable for tests."""
    from xcwrap.models.config import WrapperConfig

    return WrapperConfig(
        log_file=temp_dir / "build.log",
        grace_delay_seconds=0.01,
        progress_interval_seconds=0.05,
        output_drain_timeout_seconds=0.5,
    )


@pytest.fixture
def make_request(project_dir, temp_dir):
    """Factory for RunRequest objects with sensible test defaults."""
    from xcwrap.models.request import Operation, RunRequest

    def _make(**overrides):
        values = {
            "target_dir": project_dir,
            "scheme": "MyApp",
            "operation": Operation.BUILD,
            "timeout_seconds": 30,
            "log_file": temp_dir / "build.log",
            "device": "iPhone 16 Pro",
            "quiet": True,
        }
        values.update(overrides)
        return RunRequest(**values)

    return _make


@pytest.fixture
def sample_config_data():
    """Sample [wrapper] table for configuration tests."""
    return {
        "defaults": {
            "device": "iPhone 15",
            "timeout_seconds": 120,
            "test_timeout_seconds": 900,
            "log_file": "",
        },
        "supervision": {
            "grace_delay_seconds": 0.2,
            "progress_interval_seconds": 0.5,
            "output_drain_timeout_seconds": 1.0,
        },
        "tools": {
            "build_tool": "/usr/bin/xcodebuild",
            "device_list_command": ["xcrun", "simctl", "list", "devices"],
            "simulator_platform": "iOS Simulator",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump({"wrapper": sample_config_data}, f)
    return path


# ============================================================================
# Test Utilities
# ============================================================================


class TestUtils:
    """Utility functions for testing."""

    @staticmethod
    def write_script(path: Path, body: str) -> Path:
        """Write an executable shell script."""
        path.write_text("#!/bin/sh\n" + body)
        os.chmod(path, 0o755)
        return path

    @staticmethod
    def make_command(script: str, working_dir: Path, argv: List[str] = None):
        """Wrap an arbitrary shell snippet as a BuildCommand."""
        from xcwrap.orchestration.command_builder import BuildCommand, BuildDescriptor

        return BuildCommand(
            argv=argv or ["sh", "-c", script],
            command_line=script,
            working_dir=working_dir,
            descriptor=BuildDescriptor(kind="project", name="MyApp.xcodeproj"),
        )


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from xcwrap.config import clear_config_cache, reset_config_path

    clear_config_cache()
    reset_config_path()
