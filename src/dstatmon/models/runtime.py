"""
Runtime data models.

This module contains data structures that only exist while the sampler is
running: the handle of the live subprocess and shared timing constants.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass
class SubprocessHandle:
    """
    The currently running sampler process.

    A supervisor holds exactly one handle at a time and replaces it wholesale
    on restart.
    """

    pid: int
    command: List[str]
    output_file: Path
    process: Optional[subprocess.Popen] = None

    @property
    def command_line(self) -> str:
        return " ".join(self.command)


class RuntimeConstants:
    """
    Centralized timing constants for the event loop and supervisor.
    """

    # Seconds the host waits for the reactor thread to start or stop.
    REACTOR_START_TIMEOUT = 5.0
    REACTOR_STOP_TIMEOUT = 10.0

    # Seconds the host waits for a call marshalled onto the reactor thread.
    REACTOR_CALL_TIMEOUT = 30.0

    # Seconds allowed for the one-shot hostname command.
    HOSTNAME_COMMAND_TIMEOUT = 10.0

    # Seconds between fault checks while the CLI waits for a signal.
    CLI_HEALTH_CHECK_INTERVAL = 1.0
