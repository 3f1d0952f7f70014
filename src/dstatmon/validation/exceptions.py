"""
Exceptions raised by dstatmon and helpers to report them.

The `handle_*` helpers log an error once, at a chosen severity and with a
context prefix, and then either re-raise it or (for the CLI) exit.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Log level used when reporting an error."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Levels at which the traceback is worth logging.
_TRACEBACK_SEVERITIES = {ErrorSeverity.DEBUG, ErrorSeverity.ERROR, ErrorSeverity.CRITICAL}


class ValidationError(Exception):
    """
    A configuration or command-line value was rejected.

    Attributes:
        field_name: Dotted name of the setting, e.g. "input.delay"
        value: The rejected raw value
        severity: How the error should be reported
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class SamplerStartError(RuntimeError):
    """Raised when the sampling command cannot be launched."""

    def __init__(self, command: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to start sampler '{command}': {cause}")
        self.command = command
        self.cause = cause


class ReactorFault(RuntimeError):
    """
    Raised to the host when the event loop stopped because of an unexpected
    exception. Once this happens no further tailing or staleness checks run.
    """

    def __init__(self, context: str, cause: BaseException):
        super().__init__(f"Reactor stopped after unexpected error in {context}: {cause}")
        self.context = context
        self.cause = cause


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log `error` as "Error in <context>: <error>" and optionally re-raise it.

    Args:
        error: The exception being reported
        context: Where it happened, e.g. "config parsing conf/config.toml"
        severity: ErrorSeverity member or its string value
        reraise: Raise `error` again after logging
        logger: Logger to report to, defaults to this module's logger
    """
    target = logger or globals()["logger"]
    level = ErrorSeverity(severity.lower()) if isinstance(severity, str) else severity
    log = getattr(target, level.value)
    log(f"Error in {context}: {error}", exc_info=level in _TRACEBACK_SEVERITIES)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    handle_error(error, f"file {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log an error that ends the command-line run, then exit with `exit_code`."""
    exit_code = kwargs.pop("exit_code", 1)
    kwargs.setdefault("severity", ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", reraise=False, **kwargs)
    sys.exit(exit_code)
