"""
Record sinks receiving decoded dstat samples.

- RecordSink: common interface
- JsonLinesSink: JSON lines on a text stream
- ParquetSink: buffered Parquet file written with Polars
- RecordInjector: optional hostname/tag/time fields
"""

from .base import RecordSink
from .factory import create_sink
from .injector import RecordInjector
from .jsonl import JsonLinesSink
from .parquet import ParquetSink, flatten_record

__all__ = [
    "JsonLinesSink",
    "ParquetSink",
    "RecordInjector",
    "RecordSink",
    "create_sink",
    "flatten_record",
]
