"""
Unit tests for command execution and output file helpers.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from dstatmon.models.config import InputConfig
from dstatmon.system import (
    build_sampler_command,
    check_sampler_installed,
    remove_file,
    resolve_hostname,
    run_command,
    touch_or_truncate,
)


@pytest.mark.unit
class TestCommands:
    """Test cases for command helpers."""

    def test_build_sampler_command(self):
        config = InputConfig(
            tag="t", dstat_path="/usr/bin/dstat", option="-c -m", delay=5,
            tmp_file=Path("/var/tmp/d.csv"),
        )
        assert build_sampler_command(config) == [
            "/usr/bin/dstat", "-c", "-m", "--output", "/var/tmp/d.csv", "5",
        ]

    def test_build_sampler_command_without_options(self):
        assert build_sampler_command(InputConfig(tag="t", option="")) == [
            "dstat", "--output", "/tmp/dstat.csv", "1",
        ]

    def test_option_with_shell_metacharacters_is_one_argument(self):
        """Test that options are never interpreted by a shell."""
        config = InputConfig(tag="t", option="'-c; rm -rf /'")
        assert build_sampler_command(config)[1] == "-c; rm -rf /"

    def test_run_command_captures_output(self):
        code, out, err = run_command([sys.executable, "-c", "import sys; print('out'); sys.stderr.write('err')"])
        assert code == 0
        assert out == "out\n"
        assert err == "err"

    def test_resolve_hostname_strips_newline(self):
        assert resolve_hostname([sys.executable, "-c", "print('web-01')"]) == "web-01"

    def test_resolve_hostname_failure(self):
        with pytest.raises(RuntimeError):
            resolve_hostname([sys.executable, "-c", "import sys; sys.exit(2)"])

    def test_resolve_hostname_missing_command(self):
        with pytest.raises(FileNotFoundError):
            resolve_hostname(["/nonexistent/hostname"])

    @patch("dstatmon.system.commands.shutil.which")
    def test_check_sampler_installed(self, mock_which):
        mock_which.return_value = "/usr/bin/dstat"
        assert check_sampler_installed("dstat") is True
        mock_which.return_value = None
        assert check_sampler_installed("dstat") is False


@pytest.mark.unit
class TestFileHelpers:
    """Test cases for output file helpers."""

    def test_touch_creates_missing_file(self, temp_dir):
        path = temp_dir / "out.csv"
        touch_or_truncate(path)
        assert path.exists()
        assert path.stat().st_size == 0

    def test_touch_truncates_existing_file(self, temp_dir):
        path = temp_dir / "out.csv"
        path.write_text("old data\n")
        touch_or_truncate(path)
        assert path.stat().st_size == 0

    def test_remove_file(self, temp_dir):
        path = temp_dir / "out.csv"
        path.touch()
        assert remove_file(path) is True
        assert not path.exists()
        assert remove_file(path) is False
