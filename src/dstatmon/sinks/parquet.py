"""
Parquet sink using Polars for columnar storage of sampled rows.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Literal, Union

import polars as pl

from .base import RecordSink

logger = logging.getLogger(__name__)

Compression = Literal["snappy", "gzip", "brotli", "lz4", "zstd"]


def flatten_record(tag: str, time: float, record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten a record into one row.

    Nested mappings become dotted column names, e.g.
    `{"dstat": {"total_cpu_usage": {"usr": "1.2"}}}` yields the column
    `dstat.total_cpu_usage.usr`.
    """
    row: Dict[str, Any] = {"tag": tag, "time": time}

    def walk(prefix: str, value: Any) -> None:
        if isinstance(value, dict):
            for key, inner in value.items():
                walk(f"{prefix}.{key}" if prefix else str(key), inner)
        else:
            row[prefix] = value

    walk("", record)
    return row


class ParquetSink(RecordSink):
    """
    Buffers records and appends them to a Parquet file.

    Attributes:
        path: Target Parquet file
        compression: Parquet compression codec
        flush_every: Number of buffered rows that triggers a write
    """

    def __init__(self, path: Union[str, Path], compression: Compression = "snappy",
                 flush_every: int = 100):
        self.path = Path(path)
        self.compression = compression
        self.flush_every = flush_every
        self._rows: List[Dict[str, Any]] = []
        self._lock = threading.Lock()
        self.written = 0
        logger.debug(f"Initialized ParquetSink at {self.path} with compression: {compression}")

    def emit(self, tag: str, time: float, record: Dict[str, Any]) -> None:
        with self._lock:
            self._rows.append(flatten_record(tag, time, record))
            if len(self._rows) >= self.flush_every:
                self._flush_locked()

    def flush(self) -> None:
        with self._lock:
            self._flush_locked()

    def _flush_locked(self) -> None:
        if not self._rows:
            return
        df = pl.DataFrame(self._rows, infer_schema_length=None)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.exists():
                existing = pl.read_parquet(self.path)
                df = pl.concat([existing, df], how="diagonal_relaxed")
            df.write_parquet(self.path, compression=self.compression)
        except Exception as e:
            logger.error(f"Failed to write {len(self._rows)} rows to {self.path}: {e}")
            raise
        self.written += len(self._rows)
        logger.debug(f"Wrote {len(self._rows)} rows to {self.path}")
        self._rows.clear()

    def close(self) -> None:
        self.flush()
        logger.info(f"ParquetSink closed after writing {self.written} rows to {self.path}")
