"""
Incremental tailing of the sampler output file.

The FileTailer polls the file size on every reactor tick, reads only the bytes
appended since the previous read and hands complete lines to a
LineBatchHandler. Bytes after the last newline are kept in a LineBuffer until
their terminator arrives.
"""

import logging
import os
from pathlib import Path
from typing import IO, List, Optional, Protocol, Union

from ..reactor.watchers import Watcher

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5


class LineBatchHandler(Protocol):
    """Capability receiving the complete lines read during one poll."""

    def on_lines(self, lines: List[str]) -> None:
        ...


class LineBuffer:
    """
    Accumulates raw bytes and splits off newline-terminated lines.

    Lines are returned without their terminator; a trailing carriage return is
    dropped as well. Splitting happens on bytes so multi-byte characters cut by
    a read boundary are decoded only once complete.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline."""
        return bytes(self._buffer)

    def feed(self, data: bytes) -> List[str]:
        self._buffer.extend(data)
        end = self._buffer.rfind(b"\n")
        if end < 0:
            return []
        complete = bytes(self._buffer[:end])
        del self._buffer[:end + 1]
        return [
            raw.decode(self.encoding, errors="replace").rstrip("\r")
            for raw in complete.split(b"\n")
        ]


class FileTailer(Watcher):
    """
    Size-polling watcher that delivers newly appended lines in file order.

    The read offset only moves forward. If the file shrinks below the offset
    the tick is skipped; rotation replaces the whole tailer together with the
    truncation, so a tailer never has to recover from a shrinking file.
    A file that does not exist yet is opened on the first poll that finds it.

    Attributes:
        path: File being tailed.
        position: Number of bytes consumed so far.
    """

    def __init__(self, path: Union[str, Path], handler: LineBatchHandler,
                 interval: float = DEFAULT_POLL_INTERVAL,
                 logger: Optional[logging.Logger] = None):
        super().__init__(interval, name=f"FileTailer({path})", logger=logger)
        self.path = Path(path)
        self.handler = handler
        self.position = 0
        self.line_buffer = LineBuffer()
        self._io: Optional[IO[bytes]] = None
        self._closed = False
        self._open()

    def _open(self) -> None:
        try:
            # Unbuffered so a read never consumes bytes past the polled size.
            self._io = open(self.path, "rb", buffering=0)
        except FileNotFoundError:
            self.logger.debug(f"{self.path} does not exist yet, waiting for it")

    def on_tick(self) -> None:
        self.poll()

    def poll(self) -> List[str]:
        """
        Read any growth of the file and hand completed lines to the handler.

        Returns:
            The lines delivered during this poll.
        """
        if self._closed:
            return []
        if self._io is None:
            self._open()
            if self._io is None:
                return []
        try:
            size = os.stat(self.path).st_size
        except FileNotFoundError:
            self.logger.debug(f"{self.path} disappeared, skipping poll")
            return []

        if size <= self.position:
            if size < self.position:
                self.logger.debug(
                    f"{self.path} shrank to {size} bytes below offset {self.position}, skipping poll"
                )
            return []

        data = self._read(size - self.position)
        self.position += len(data)
        lines = self.line_buffer.feed(data)
        self.handler.on_lines(lines)
        return lines

    def _read(self, count: int) -> bytes:
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self._io.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def on_detach(self) -> None:
        self.close()

    def close(self) -> None:
        self._closed = True
        if self._io is not None:
            self._io.close()
            self._io = None
