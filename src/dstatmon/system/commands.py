"""
Command execution utilities.

This module provides functions for executing one-shot system commands,
assembling the sampler argument vector and checking for the sampler binary.
Commands are always executed as argument vectors, never through a shell.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..models.config import InputConfig
from ..models.runtime import RuntimeConstants

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str], cwd: Optional[Path] = None, timeout: Optional[float] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output.

    Args:
        args: Argument vector; args[0] is the executable.
        cwd: Working directory for command execution.
        timeout: Seconds before the command is abandoned.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the command outlives `timeout`.
    """
    logger.debug(f"Executing command: {list(args)}")
    process = subprocess.run(
        list(args),
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        check=False,
    )
    return process.returncode, process.stdout, process.stderr


def resolve_hostname(hostname_args: Sequence[str]) -> str:
    """Run the hostname command once and return its output without the trailing newline.

    Args:
        hostname_args: Argument vector of the hostname command.

    Returns:
        The host name reported by the command.

    Raises:
        FileNotFoundError: If the command does not exist.
        RuntimeError: If the command exits with a non-zero status.
    """
    return_code, stdout, stderr = run_command(
        hostname_args, timeout=RuntimeConstants.HOSTNAME_COMMAND_TIMEOUT
    )
    if return_code != 0:
        raise RuntimeError(
            f"Hostname command {list(hostname_args)} exited with {return_code}: {stderr.strip()}"
        )
    hostname = stdout.rstrip("\r\n")
    logger.info(f"Resolved hostname: {hostname}")
    return hostname


def build_sampler_command(input_config: InputConfig) -> List[str]:
    """Assemble the dstat argument vector.

    Produces `<dstat_path> <options...> --output <tmp_file> <delay>`.

    Examples:
        >>> build_sampler_command(InputConfig(tag="t"))
        ['dstat', '-fcdnm', '--output', '/tmp/dstat.csv', '1']
    """
    return [
        input_config.dstat_path,
        *input_config.option_args(),
        "--output",
        str(input_config.tmp_file),
        str(input_config.delay),
    ]


def check_sampler_installed(dstat_path: str = "dstat") -> bool:
    """Check if the sampler executable can be found.

    Returns:
        True if `dstat_path` resolves to an executable, False otherwise.
    """
    return shutil.which(dstat_path) is not None
