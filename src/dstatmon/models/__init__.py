"""
Data models for the dstat input pipeline.

Configuration Models:
- Sampler command, tailing, injection and output settings

Record Models:
- Composite header keys and decoded sample records

Runtime Models:
- Handle of the live sampler subprocess and timing constants
"""

from .config import AppConfig, InjectConfig, InputConfig, OutputConfig, TailingConfig
from .records import KeyTable, MetricData, Record
from .runtime import RuntimeConstants, SubprocessHandle

__all__ = [
    # Configuration
    "AppConfig",
    "InjectConfig",
    "InputConfig",
    "OutputConfig",
    "TailingConfig",
    # Records
    "KeyTable",
    "MetricData",
    "Record",
    # Runtime
    "RuntimeConstants",
    "SubprocessHandle",
]
