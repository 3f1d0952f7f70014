"""
dstatmon: streaming dstat samples as structured records.

The package runs `dstat --output <file>`, tails the CSV file it writes,
decodes the composite header and data rows and forwards each sample to a
record sink. A stalled sampler is restarted automatically and the output
file is truncated periodically to bound its size.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Command execution and file helpers
- reactor: Event loop and periodic watchers
- tailing: Incremental file tailing
- parsing: dstat CSV decoding
- orchestration: Sampler supervision, rotation and staleness detection
- sinks: Record output
- cli: Command-line interface

Usage:
    From command line:
        dstatmon --config conf/config.toml

    Programmatically:
        from dstatmon import DstatInput, JsonLinesSink, get_config
        dstat_input = DstatInput(get_config(), JsonLinesSink())
        dstat_input.start()
"""

from .config import clear_config_cache, get_config, set_config_path
from .models import AppConfig, InjectConfig, InputConfig, KeyTable, OutputConfig, Record, TailingConfig
from .orchestration import DstatInput, ProcessSupervisor
from .parsing import DstatCsvDecoder
from .reactor import Reactor
from .sinks import JsonLinesSink, ParquetSink, RecordSink, create_sink
from .tailing import FileTailer, LineBuffer
from .validation import ReactorFault, SamplerStartError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Models
    "AppConfig",
    "InjectConfig",
    "InputConfig",
    "KeyTable",
    "OutputConfig",
    "Record",
    "TailingConfig",
    # Pipeline
    "DstatCsvDecoder",
    "DstatInput",
    "FileTailer",
    "LineBuffer",
    "ProcessSupervisor",
    "Reactor",
    # Sinks
    "JsonLinesSink",
    "ParquetSink",
    "RecordSink",
    "create_sink",
    # Errors
    "ReactorFault",
    "SamplerStartError",
    "ValidationError",
]
