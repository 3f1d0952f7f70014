"""
Incremental file tailing.
"""

from .file_tailer import DEFAULT_POLL_INTERVAL, FileTailer, LineBatchHandler, LineBuffer

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "FileTailer",
    "LineBatchHandler",
    "LineBuffer",
]
