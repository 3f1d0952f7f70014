"""
Checks applied to raw values read from config.toml and the command line.

Every validator returns the normalized value or raises ValidationError
naming the offending field.
"""

import shlex
from typing import Any, Callable, List, Optional, TypeVar

from .exceptions import ValidationError

N = TypeVar("N", int, float)


def _check_range(number: N, raw: Any, min_value: N, max_value: Optional[N], field_name: str) -> N:
    if number < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {number}", field_name=field_name, value=raw
        )
    if max_value is not None and number > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {number}", field_name=field_name, value=raw
        )
    return number


def _coerce(value: Any, convert: Callable[[Any], N], kind: str, field_name: str) -> N:
    # TOML booleans are ints to Python; `delay = true` is a mistake, not 1.
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be {kind}, got {value}", field_name=field_name, value=value
        )
    try:
        return convert(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be {kind}, got {value!r}", field_name=field_name, value=value
        )


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer setting such as `delay` or `max_lines`.

    Args:
        value: Raw value
        min_value: Smallest accepted value
        max_value: Largest accepted value, unbounded when None
        field_name: Dotted setting name used in the error

    Raises:
        ValidationError: If the value is not an integer or out of range
    """
    number = _coerce(value, int, "an integer", field_name)
    return _check_range(number, value, min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """Validate an interval or timeout given in seconds."""
    number = _coerce(value, float, "a number", field_name)
    return _check_range(number, value, min_value, max_value, field_name)


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string", field_name=field_name, value=value
        )
    return value


def validate_simple_command(command: Any, field_name: str = "command") -> str:
    """
    Validate a command line that will be split with shlex and executed
    without a shell.

    >>> validate_simple_command("hostname -f")
    'hostname -f'
    """
    validate_non_empty_string(command, field_name)
    _split(command, field_name, "a command line")
    return command


def validate_option_string(option: Any, field_name: str = "option") -> str:
    """Validate extra sampler arguments. An empty string means no options."""
    if not isinstance(option, str):
        raise ValidationError(f"{field_name} must be a string", field_name=field_name, value=option)
    _split(option, field_name, "command-line options")
    return option


def _split(text: str, field_name: str, what: str) -> List[str]:
    try:
        return shlex.split(text)
    except ValueError as e:
        raise ValidationError(
            f"{field_name} cannot be parsed as {what}: {e}", field_name=field_name, value=text
        )


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of `valid_choices`.

    With `case_sensitive=False` the spelling from `valid_choices` is returned,
    so "debug" comes back as "DEBUG".

    Raises:
        ValidationError: If value is not in choices
    """
    text = str(value)
    if case_sensitive:
        matches = [choice for choice in valid_choices if choice == text]
    else:
        matches = [choice for choice in valid_choices if choice.lower() == text.lower()]
    if not matches:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value}",
            field_name=field_name,
            value=value,
        )
    return matches[0]


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false", field_name=field_name, value=value)
    return value
