"""
Sink writing one JSON document per record to a text stream.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from .base import RecordSink

logger = logging.getLogger(__name__)


class JsonLinesSink(RecordSink):
    """
    Writes `{"tag": ..., "time": ..., "record": {...}}` lines, flushing after
    each record so downstream readers see samples immediately.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.emitted = 0

    def emit(self, tag: str, time: float, record: Dict[str, Any]) -> None:
        line = json.dumps({"tag": tag, "time": time, "record": record}, ensure_ascii=False)
        self.stream.write(line + "\n")
        self.stream.flush()
        self.emitted += 1

    def close(self) -> None:
        try:
            self.stream.flush()
        except ValueError:
            # Stream already closed by its owner.
            pass
        logger.debug(f"JsonLinesSink closed after {self.emitted} records")
