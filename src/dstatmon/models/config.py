"""
Configuration data models.

This module contains all configuration-related data structures for the
sampler input, the tailing pipeline, record injection and record output.
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class InputConfig:
    """
    Configuration for the sampling command, loaded from `[input]` in `config.toml`.
    """

    # Tag attached to every emitted record.
    tag: str
    # Path (or name on $PATH) of the dstat executable.
    dstat_path: str = "dstat"
    # Command-line options passed to dstat before `--output`.
    option: str = "-fcdnm"
    # dstat sampling delay in seconds; also drives the staleness threshold.
    delay: int = 1
    # CSV file dstat writes to; truncated periodically and deleted on shutdown.
    tmp_file: Path = Path("/tmp/dstat.csv")
    # Command whose output becomes the `hostname` field of every record.
    hostname_command: str = "hostname"

    def option_args(self) -> List[str]:
        """Split the option string into discrete arguments."""
        return shlex.split(self.option)

    def hostname_args(self) -> List[str]:
        """Split the hostname command into an argument vector."""
        return shlex.split(self.hostname_command)


@dataclass
class TailingConfig:
    """
    Timing and rotation settings for the tailing pipeline, loaded from `[tailing]`.
    """

    # Seconds between file size polls.
    poll_interval: float = 0.5
    # Number of processed lines after which the output file is truncated.
    max_lines: int = 100
    # Seconds between staleness checks.
    check_interval: float = 1.0
    # A run is stale after `delay * staleness_factor` seconds without a line.
    staleness_factor: int = 3
    # Seconds to wait for a terminated sampler before killing it.
    terminate_timeout: float = 5.0


@dataclass
class InjectConfig:
    """
    Optional fields injected into each record, loaded from `[inject]`.

    An empty key disables the corresponding field.
    """

    hostname_key: str = ""
    tag_key: str = ""
    time_key: str = ""
    # "float" (epoch seconds), "unixtime" (integer seconds) or "string".
    time_type: str = "float"
    # strftime format used when time_type is "string".
    time_format: str = "%Y-%m-%dT%H:%M:%S%z"
    utc: bool = False

    @property
    def enabled(self) -> bool:
        return bool(self.hostname_key or self.tag_key or self.time_key)


@dataclass
class OutputConfig:
    """
    Record sink selection, loaded from `[output]`.
    """

    # "stdout" writes JSON lines, "parquet" appends to a Parquet file.
    type: str = "stdout"
    path: Path = Path("dstat.parquet")
    compression: str = "snappy"
    # Records buffered before the Parquet sink writes them out.
    flush_every: int = 100


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    input: InputConfig
    tailing: TailingConfig = field(default_factory=TailingConfig)
    inject: InjectConfig = field(default_factory=InjectConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
