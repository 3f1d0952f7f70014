"""
Process management for the sampler subprocess.

This module handles launching dstat, signalling it and reaping it so that a
replaced sampler never lingers as a zombie.
"""

import logging
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

import psutil

from ..models.runtime import SubprocessHandle
from ..validation import SamplerStartError

logger = logging.getLogger(__name__)


class SamplerProcessManager:
    """
    Spawns, terminates and reaps sampler processes.

    The sampler writes its CSV output to a file on its own schedule, so its
    standard streams are discarded instead of piped; an unread pipe would
    eventually block the sampler.
    """

    def __init__(self, terminate_timeout: float = 5.0, logger: Optional[logging.Logger] = None):
        self.terminate_timeout = terminate_timeout
        self.logger = logger or globals()["logger"]
        self._reapers: List[threading.Thread] = []

    def spawn(self, command: List[str], output_file: Path) -> SubprocessHandle:
        """
        Launch the sampler.

        Args:
            command: Full argument vector
            output_file: File the sampler was told to write to

        Returns:
            Handle of the started process

        Raises:
            SamplerStartError: If the executable is missing or cannot be run
        """
        command_line = " ".join(command)
        self.logger.info(f"Starting sampler with command: {command_line}")
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            self.logger.error(f"Failed to start sampler: {e}")
            raise SamplerStartError(command_line, e) from e

        self.logger.info(f"Sampler process started (PID: {process.pid})")
        return SubprocessHandle(
            pid=process.pid,
            command=list(command),
            output_file=output_file,
            process=process,
        )

    def terminate(self, handle: SubprocessHandle) -> bool:
        """
        Send SIGTERM to the sampler.

        A process that already exited is not an error: the condition is
        logged and False is returned.

        Returns:
            True if the signal was delivered
        """
        if handle.process is not None and handle.process.poll() is not None:
            self.logger.error(
                f"Unexpected death of sampler process (PID: {handle.pid}), "
                f"exit code {handle.process.returncode}"
            )
            return False
        try:
            psutil.Process(handle.pid).terminate()
            self.logger.debug(f"Sent SIGTERM to sampler (PID: {handle.pid})")
            return True
        except psutil.NoSuchProcess as e:
            self.logger.error(
                f"Unexpected death of sampler process (PID: {handle.pid}): {e}"
            )
            return False
        except psutil.AccessDenied as e:
            self.logger.warning(f"Access denied sending SIGTERM to PID {handle.pid}: {e}")
            return False

    def detach(self, handle: SubprocessHandle) -> Optional[threading.Thread]:
        """
        Reap the sampler in the background.

        A reaper thread waits for the process to exit, killing it if it
        outlives `terminate_timeout`. The caller never blocks.

        Returns:
            The reaper thread, or None if the handle has no process object
        """
        process = handle.process
        if process is None:
            return None

        self._reapers = [t for t in self._reapers if t.is_alive()]
        reaper = threading.Thread(
            target=self._reap,
            args=(process,),
            name=f"sampler-reaper-{handle.pid}",
            daemon=True,
        )
        reaper.start()
        self._reapers.append(reaper)
        return reaper

    def _reap(self, process: subprocess.Popen) -> None:
        try:
            exit_code = process.wait(timeout=self.terminate_timeout)
            self.logger.info(f"Sampler process (PID: {process.pid}) exited with code {exit_code}")
        except subprocess.TimeoutExpired:
            self.logger.warning(
                f"Sampler process (PID: {process.pid}) did not terminate gracefully, killing..."
            )
            process.kill()
            process.wait()
        except Exception as e:
            self.logger.error(f"Error while reaping sampler (PID: {process.pid}): {e}", exc_info=True)

    def join_reapers(self, timeout: Optional[float] = None) -> None:
        """Wait for outstanding reaper threads, mainly for shutdown and tests."""
        for reaper in self._reapers:
            reaper.join(timeout)
        self._reapers = [t for t in self._reapers if t.is_alive()]
