"""
Unit tests for input validation helpers and the error handling utilities.
"""

import logging

import pytest

from xcwrap.validation import (
    ErrorSeverity,
    InvalidDevice,
    NoDescriptorFound,
    SetupError,
    ToolUnavailable,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)


@pytest.mark.unit
class TestPositiveInteger:
    """Test cases for validate_positive_integer."""

    def test_accepts_int_and_numeric_string(self):
        assert validate_positive_integer(300) == 300
        assert validate_positive_integer(" 42 ") == 42

    @pytest.mark.parametrize("value", [0, -5, "0", "-1"])
    def test_rejects_non_positive(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(value, field_name="--timeout")
        assert "--timeout" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["abc", "1.5", 1.5, True, None, ""])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError):
            validate_positive_integer(value)

    def test_max_value(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(11, max_value=10)

    def test_error_carries_field_and_value(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer("x", field_name="timeout")
        assert exc_info.value.field_name == "timeout"
        assert exc_info.value.value == "x"
        assert exc_info.value.severity is ErrorSeverity.ERROR


@pytest.mark.unit
class TestOtherValidators:
    """Test cases for the remaining value validators."""

    def test_positive_float_bounds(self):
        assert validate_positive_float("0.5") == 0.5
        assert validate_positive_float(0) == 0.0
        with pytest.raises(ValidationError):
            validate_positive_float(-0.1)
        with pytest.raises(ValidationError):
            validate_positive_float(5, max_value=1.0)
        with pytest.raises(ValidationError):
            validate_positive_float(False)

    def test_non_empty_string(self):
        assert validate_non_empty_string("MyApp") == "MyApp"
        for value in ("", "   ", None, 3):
            with pytest.raises(ValidationError):
                validate_non_empty_string(value)

    def test_string_list(self):
        assert validate_string_list(["xcrun", "simctl"]) == ["xcrun", "simctl"]
        for value in ([], "xcrun", ["xcrun", ""], [1]):
            with pytest.raises(ValidationError):
                validate_string_list(value)

    def test_enum_choice(self):
        choices = ["build", "test"]
        assert validate_enum_choice("test", choices) == "test"
        with pytest.raises(ValidationError):
            validate_enum_choice("BUILD", choices)
        with pytest.raises(ValidationError):
            validate_enum_choice("deploy", choices)


@pytest.mark.unit
class TestSetupErrors:
    """Test cases for the setup error taxonomy."""

    def test_all_are_setup_errors(self):
        assert issubclass(NoDescriptorFound, SetupError)
        assert issubclass(InvalidDevice, SetupError)
        assert issubclass(ToolUnavailable, SetupError)

    def test_messages(self, temp_dir):
        assert str(temp_dir) in str(NoDescriptorFound(temp_dir))

        invalid = InvalidDevice("iPhone 99", "iPhone 15 (ABC)\n")
        assert '"iPhone 99"' in str(invalid)
        assert invalid.available_devices == "iPhone 15 (ABC)\n"

        unavailable = ToolUnavailable("xcrun simctl list", "boom")
        assert "xcrun simctl list" in str(unavailable)
        assert "boom" in str(unavailable)


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the error handling helpers."""

    def test_handle_error_reraises_by_default(self):
        with pytest.raises(RuntimeError):
            handle_error(RuntimeError("boom"), "testing")

    def test_handle_error_logs_at_severity(self, caplog):
        test_logger = logging.getLogger("xcwrap.test")
        with caplog.at_level(logging.DEBUG, logger="xcwrap.test"):
            handle_error(
                RuntimeError("disk full"),
                "writing log",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=test_logger,
            )
        assert any(
            r.levelno == logging.WARNING and "Error in writing log: disk full" in r.getMessage()
            for r in caplog.records
        )

    def test_handle_error_accepts_string_severity(self, caplog):
        test_logger = logging.getLogger("xcwrap.test")
        with caplog.at_level(logging.DEBUG, logger="xcwrap.test"):
            handle_error(ValueError("x"), "ctx", severity="INFO", reraise=False, logger=test_logger)
        assert caplog.records[-1].levelno == logging.INFO

    def test_handle_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(RuntimeError("bad config"), "loading", exit_code=1)
        assert exc_info.value.code == 1
