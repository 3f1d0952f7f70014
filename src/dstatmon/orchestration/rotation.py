"""
Bounding the size of the sampler output file.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from ..system.files import touch_or_truncate

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 100


class TailerOwner(Protocol):
    """Owner of the active FileTailer, able to swap it out."""

    def detach_tailer(self) -> None:
        ...

    def attach_tailer(self) -> None:
        ...


class RotationManager:
    """
    Truncates the output file every `max_lines` processed lines.

    The tailer is detached before the truncation and a fresh one starting at
    offset 0 is attached after it. Decoder state is not touched: the sampler
    keeps writing data rows into the emptied file without repeating headers.
    """

    def __init__(self, output_file: Union[str, Path], owner: TailerOwner,
                 max_lines: int = DEFAULT_MAX_LINES,
                 logger: Optional[logging.Logger] = None):
        if max_lines < 1:
            raise ValueError(f"max_lines must be positive, got {max_lines}")
        self.output_file = Path(output_file)
        self.owner = owner
        self.max_lines = max_lines
        self.logger = logger or globals()["logger"]
        self.rotations = 0

    def is_due(self, line_index: int) -> bool:
        return line_index % self.max_lines == self.max_lines - 1

    def on_line_processed(self, line_index: int) -> bool:
        """
        Rotate if `line_index` closes a block of `max_lines` lines.

        Returns:
            True if the file was rotated
        """
        if not self.is_due(line_index):
            return False
        self.owner.detach_tailer()
        touch_or_truncate(self.output_file)
        self.owner.attach_tailer()
        self.rotations += 1
        self.logger.debug(f"Rotated {self.output_file} after line {line_index}")
        return True
