"""
Validation and error handling for the dstatmon package.

Exceptions raised across dstatmon (ValidationError, SamplerStartError,
ReactorFault), the handle_* reporting helpers and the value validators used
while reading config.toml and command-line overrides.
"""

from .exceptions import (
    ErrorSeverity,
    ReactorFault,
    SamplerStartError,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_file_error,
    handle_subprocess_error,
    handle_cli_error,
)

from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_non_empty_string,
    validate_option_string,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

__all__ = [
    # Exceptions and reporting
    "ErrorSeverity",
    "ReactorFault",
    "SamplerStartError",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_option_string",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_simple_command",
]
