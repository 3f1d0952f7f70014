"""
Pytest configuration and shared fixtures for the dstatmon test suite.

This module provides common fixtures, test doubles and configuration
for all test modules in the project.
"""

import shlex
import shutil
import sys
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FAKE_DSTAT = Path(__file__).parent / "fixtures" / "fake_dstat.py"


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def dstat_lines() -> List[str]:
    """Banner, both header rows and two data rows as dstat writes them."""
    return [
        '"Dstat 0.7.4 CSV output"',
        '"Author:","Dag Wieers <dag@wieers.com>",,,,"URL:","http://dag.wieers.com/home-made/dstat/"',
        '"total cpu usage",,,"dsk/total",,"memory usage"',
        '"usr","sys","idl","read","writ","used"',
        "1.2,3.4,95.4,0,8192,1024",
        "2.0,1.0,97.0,4096,0,2048",
    ]


@pytest.fixture
def sample_config_data(temp_dir) -> Dict[str, Any]:
    """Sample configuration data for testing."""
    return {
        "general": {"log_level": "DEBUG"},
        "input": {
            "tag": "dstat.test",
            "dstat_path": "dstat",
            "option": "-fcdnm",
            "delay": 1,
            "tmp_file": str(temp_dir / "dstat.csv"),
            "hostname_command": "hostname",
        },
        "tailing": {
            "poll_interval": 0.5,
            "max_lines": 100,
            "check_interval": 1.0,
            "staleness_factor": 3,
            "terminate_timeout": 5.0,
        },
        "inject": {"tag_key": "tag", "time_key": "time"},
        "output": {"type": "stdout"},
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {"config": config_file, "dir": temp_dir}


# ============================================================================
# Test Doubles
# ============================================================================


class RecordingSink:
    """RecordSink double keeping every emitted event."""

    def __init__(self):
        self.events: List[Tuple[str, float, Dict[str, Any]]] = []
        self.closed = False
        self._lock = threading.Lock()
        self.received = threading.Event()

    def emit(self, tag, time, record):
        with self._lock:
            self.events.append((tag, time, record))
        self.received.set()

    def close(self):
        self.closed = True

    @property
    def records(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [record for _, _, record in self.events]


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_dstat_option():
    """Build an `[input].option` string that runs the fake sampler via the interpreter."""

    def build(*extra: str) -> str:
        return " ".join(shlex.quote(part) for part in (str(FAKE_DSTAT), *extra))

    return build


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield

    from dstatmon.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
