"""
End-to-end tests running the complete pipeline against a fake sampler.

The fake sampler (tests/fixtures/fake_dstat.py) writes dstat-style CSV to the
file given with `--output`, so every component runs for real: subprocess
management, tailing, decoding, rotation, staleness restarts and shutdown.
"""

import sys
import time

import psutil
import pytest

from dstatmon.models.config import AppConfig, InputConfig, TailingConfig
from dstatmon.orchestration.dstat_input import DstatInput


def wait_for(condition, timeout=15.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.05)
    return condition()


@pytest.mark.e2e
@pytest.mark.slow
class TestDstatPipeline:
    """End-to-end scenarios for DstatInput."""

    @pytest.fixture(autouse=True)
    def _setup(self, temp_dir, recording_sink, fake_dstat_option):
        self.tmp_file = temp_dir / "dstat.csv"
        self.sink = recording_sink
        self.option = fake_dstat_option
        self.inputs = []
        yield
        for dstat_input in self.inputs:
            dstat_input.shutdown()

    def _start(self, option, **tailing):
        config = AppConfig(
            input=InputConfig(
                tag="dstat.e2e",
                dstat_path=sys.executable,
                option=option,
                delay=1,
                tmp_file=self.tmp_file,
                hostname_command=f"{sys.executable} -c \"print('e2e-host')\"",
            ),
            tailing=TailingConfig(poll_interval=0.1, check_interval=0.2, terminate_timeout=2.0, **tailing),
        )
        dstat_input = DstatInput(config, self.sink)
        self.inputs.append(dstat_input)
        dstat_input.start()
        return dstat_input

    def test_records_are_streamed(self):
        dstat_input = self._start(self.option("--interval", "0.1"))

        assert wait_for(lambda: len(self.sink.events) >= 3)
        tag, _, record = self.sink.events[0]
        assert tag == "dstat.e2e"
        assert record == {
            "hostname": "e2e-host",
            "dstat": {
                "total_cpu_usage": {"usr": "1.0", "sys": "1.5"},
                "memory_usage": {"used": "1024"},
            },
        }
        dstat_input.raise_if_failed()

    def test_rotation_bounds_the_output_file(self):
        dstat_input = self._start(self.option("--interval", "0.05"), max_lines=10)

        assert wait_for(lambda: dstat_input.supervisor.rotation.rotations >= 2)
        assert self.tmp_file.stat().st_size < 10 * 64
        used = [r["dstat"]["memory_usage"]["used"] for r in self.sink.records]
        assert used[:6] == [str(n * 1024) for n in range(1, 7)]
        assert dstat_input.supervisor.restart_count == 0

    def test_stalled_sampler_is_restarted(self):
        """Test that a sampler which stops writing is replaced."""
        dstat_input = self._start(self.option("--rows", "2", "--interval", "0.1"))
        assert wait_for(lambda: len(self.sink.events) >= 2)
        first_pid = dstat_input.supervisor.pid

        assert wait_for(lambda: dstat_input.supervisor.restart_count >= 1)
        assert dstat_input.supervisor.pid != first_pid
        assert wait_for(lambda: len(self.sink.events) >= 4)
        assert self.sink.records[2]["dstat"]["memory_usage"] == {"used": "1024"}
        assert wait_for(lambda: not psutil.pid_exists(first_pid))

    def test_shutdown_cleans_up(self):
        dstat_input = self._start(self.option("--interval", "0.1"))
        assert wait_for(lambda: len(self.sink.events) >= 1)
        pid = dstat_input.supervisor.pid

        dstat_input.shutdown()

        assert not self.tmp_file.exists()
        assert self.sink.closed
        assert not dstat_input.is_running
        assert wait_for(lambda: not psutil.pid_exists(pid), timeout=5.0)
