"""
Unit tests for SamplerProcessManager.

Tests spawn errors, SIGTERM delivery and background reaping of real
short-lived child processes.
"""

import logging
import sys
import time
from unittest.mock import patch

import psutil
import pytest

from dstatmon.models.runtime import SubprocessHandle
from dstatmon.orchestration.process_manager import SamplerProcessManager
from dstatmon.validation import SamplerStartError

SLEEPER = [sys.executable, "-c", "import time; time.sleep(60)"]


@pytest.mark.unit
class TestSamplerProcessManager:
    """Test cases for process spawning and reaping."""

    def setup_method(self):
        self.manager = SamplerProcessManager(terminate_timeout=5.0)

    def test_spawn_returns_handle(self, temp_dir):
        handle = self.manager.spawn(SLEEPER, temp_dir / "out.csv")
        try:
            assert handle.pid == handle.process.pid
            assert handle.command == SLEEPER
            assert handle.output_file == temp_dir / "out.csv"
        finally:
            handle.process.kill()
            handle.process.wait()

    def test_spawn_missing_executable(self, temp_dir):
        """Test that an unknown executable raises SamplerStartError."""
        with pytest.raises(SamplerStartError) as exc_info:
            self.manager.spawn(["/nonexistent/dstat", "--output", "x"], temp_dir / "x")
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_terminate_and_reap(self, temp_dir):
        """Test that a terminated sampler is reaped in the background."""
        handle = self.manager.spawn(SLEEPER, temp_dir / "out.csv")

        assert self.manager.terminate(handle) is True
        reaper = self.manager.detach(handle)
        assert reaper.name == f"sampler-reaper-{handle.pid}"

        self.manager.join_reapers(timeout=10)
        assert handle.process.returncode is not None

    def test_terminate_already_exited_process(self, temp_dir, caplog):
        """Test that an unexpected death is logged, not raised."""
        handle = self.manager.spawn([sys.executable, "-c", "pass"], temp_dir / "out.csv")
        handle.process.wait()

        with caplog.at_level(logging.ERROR):
            assert self.manager.terminate(handle) is False
        assert "Unexpected death" in caplog.text

    def test_terminate_vanished_pid(self, temp_dir, caplog):
        """Test the NoSuchProcess path when no Popen object is available."""
        handle = SubprocessHandle(pid=424242, command=["dstat"], output_file=temp_dir / "x")
        with patch(
            "dstatmon.orchestration.process_manager.psutil.Process",
            side_effect=psutil.NoSuchProcess(424242),
        ):
            with caplog.at_level(logging.ERROR):
                assert self.manager.terminate(handle) is False
        assert "Unexpected death" in caplog.text
        assert self.manager.detach(handle) is None

    def test_reaper_kills_process_ignoring_sigterm(self, temp_dir):
        """Test the kill fallback after the terminate timeout."""
        manager = SamplerProcessManager(terminate_timeout=0.5)
        stubborn = [
            sys.executable,
            "-c",
            "import signal, time; signal.signal(signal.SIGTERM, signal.SIG_IGN); "
            "print('ready', flush=True); time.sleep(60)",
        ]
        handle = manager.spawn(stubborn, temp_dir / "out.csv")
        # Give the child a moment to install its handler.
        time.sleep(0.5)

        manager.terminate(handle)
        manager.detach(handle)
        manager.join_reapers(timeout=10)
        assert handle.process.returncode is not None
