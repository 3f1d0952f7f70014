"""
System interaction utilities.

This module provides command execution for the one-shot hostname lookup,
sampler command assembly and the file operations applied to the sampler
output file.
"""

from .commands import (
    build_sampler_command,
    check_sampler_installed,
    resolve_hostname,
    run_command,
)
from .files import remove_file, touch_or_truncate

__all__ = [
    # Commands
    "build_sampler_command",
    "check_sampler_installed",
    "resolve_hostname",
    "run_command",
    # Files
    "remove_file",
    "touch_or_truncate",
]
