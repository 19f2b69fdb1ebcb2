"""
Validators shared by the command line and the configuration loader.

Each validator returns the normalised value or raises ValidationError naming
the offending field, so callers can surface the message as-is.
"""

from typing import Any, List, Optional

from .exceptions import ValidationError


def _invalid(field_name: str, value: Any, reason: str) -> ValidationError:
    return ValidationError(f"{field_name} {reason}, got {value!r}", field_name=field_name, value=value)


def _check_bounds(number, original: Any, field_name: str, min_value, max_value):
    if number < min_value:
        raise _invalid(field_name, original, f"must be >= {min_value}")
    if max_value is not None and number > max_value:
        raise _invalid(field_name, original, f"must be <= {max_value}")
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Check a whole number, such as a timeout in seconds.

    Strings spelling a whole number ("300") are converted. Booleans and
    fractional input ("1.5", 1.5) are refused rather than truncated.

    Raises:
        ValidationError: If the value is not a whole number within bounds
    """
    if isinstance(value, (bool, float)):
        raise _invalid(field_name, value, "must be a whole number")
    try:
        number = int(value.strip()) if isinstance(value, str) else int(value)
    except (ValueError, TypeError):
        raise _invalid(field_name, value, "must be a whole number")
    return _check_bounds(number, value, field_name, min_value, max_value)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Check a duration or interval given in (possibly fractional) seconds.

    Raises:
        ValidationError: If the value is not numeric or out of bounds
    """
    if isinstance(value, bool):
        raise _invalid(field_name, value, "must be a number")
    try:
        number = float(value)
    except (ValueError, TypeError):
        raise _invalid(field_name, value, "must be a number")
    return _check_bounds(number, value, field_name, min_value, max_value)


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Require a string with at least one non-blank character."""
    if not isinstance(value, str) or not value.strip():
        raise _invalid(field_name, value, "must be a non-empty string")
    return value


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """Require a non-empty list of non-empty strings, e.g. an argv."""
    if not isinstance(value, list) or not value:
        raise _invalid(field_name, value, "must be a non-empty list of strings")
    for index, item in enumerate(value):
        validate_non_empty_string(item, field_name=f"{field_name}[{index}]")
    return list(value)


def validate_enum_choice(value: Any, choices: List[str], field_name: str = "value") -> str:
    """
    Require one of a fixed set of names.

    Raises:
        ValidationError: If ``value`` is not in ``choices``
    """
    candidate = str(value)
    if candidate in choices:
        return candidate
    raise _invalid(field_name, value, f"must be one of {choices}")
