"""
Per-line processing: decode, emit, rotate.
"""

import logging
import time
from typing import TYPE_CHECKING, Callable, List, Optional

from ..models.records import MetricData, Record
from ..parsing.dstat_csv import DecodedLine, DstatCsvDecoder

if TYPE_CHECKING:
    from ..sinks.base import RecordSink
    from ..sinks.injector import RecordInjector
    from .rotation import RotationManager

logger = logging.getLogger(__name__)


class LineProcessor:
    """
    LineBatchHandler turning tailed lines into records.

    Every non-empty line goes through the decoder; data rows become records
    handed to the sink. After each line the rotation check runs and the
    last-line timestamp used for staleness detection is refreshed. All of this
    happens on the reactor thread.

    Attributes:
        last_line_time: Clock value when the latest line was processed.
        rotation: Optional RotationManager, set by the supervisor.
    """

    def __init__(self, decoder: DstatCsvDecoder, sink: "RecordSink", tag: str, hostname: str,
                 injector: Optional["RecordInjector"] = None,
                 clock: Callable[[], float] = time.time,
                 logger: Optional[logging.Logger] = None):
        self.decoder = decoder
        self.sink = sink
        self.tag = tag
        self.hostname = hostname
        self.injector = injector
        self.clock = clock
        self.logger = logger or globals()["logger"]
        self.rotation: Optional["RotationManager"] = None
        self.last_line_time = clock()
        self.records_emitted = 0
        self.emit_errors = 0

    def on_lines(self, lines: List[str]) -> None:
        for line in lines:
            if line == "":
                continue
            self.process_line(line)

    def process_line(self, line: str) -> DecodedLine:
        decoded = self.decoder.feed(line)
        if decoded.data is not None:
            self.emit(decoded.data)
        if self.rotation is not None:
            self.rotation.on_line_processed(decoded.index)
        self.last_line_time = self.clock()
        return decoded

    def emit(self, data: MetricData) -> None:
        now = self.clock()
        record = Record(hostname=self.hostname, data=data).to_dict()
        if self.injector is not None:
            record = self.injector.inject(self.tag, now, record)
        try:
            self.sink.emit(self.tag, now, record)
            self.records_emitted += 1
        except Exception as e:
            # Delivery is best effort; a failing sink must not stop tailing.
            self.emit_errors += 1
            self.logger.error(f"Failed to emit record for tag '{self.tag}': {e}", exc_info=True)

    def reset(self) -> None:
        """Prepare for a new sampler run."""
        self.decoder.reset_line_counter()
        self.last_line_time = self.clock()
