"""
Decoding of dstat CSV output.

dstat writes two banner lines, a category header, a metric header and then
one data row per sample:

    "Dstat CSV output"
    "Author:", ...
    "total cpu usage",,,"dsk/total",
    "usr","sys","idl","read","writ"
    1.2,3.4,95.4,0,8192

The category header is sparse: a category is written above its first column
only. Decoding relies on a per-run line counter, so the decoder has to be
reset whenever the sampler is restarted and re-emits its headers.
"""

import logging
import re
from enum import Enum
from typing import List, NamedTuple, Optional

from ..models.records import KeyTable, MetricData

logger = logging.getLogger(__name__)

FIRST_HEADER_LINE = 2
SECOND_HEADER_LINE = 3

_WHITESPACE = re.compile(r"\s")


class LineKind(Enum):
    BANNER = "banner"
    FIRST_HEADER = "first_header"
    SECOND_HEADER = "second_header"
    DATA = "data"


class DecodedLine(NamedTuple):
    """Result of feeding one line to the decoder."""

    index: int
    kind: LineKind
    data: Optional[MetricData] = None


def classify_line(index: int) -> LineKind:
    """Map a per-run line index to the kind of line expected there."""
    if index < FIRST_HEADER_LINE:
        return LineKind.BANNER
    if index == FIRST_HEADER_LINE:
        return LineKind.FIRST_HEADER
    if index == SECOND_HEADER_LINE:
        return LineKind.SECOND_HEADER
    return LineKind.DATA


def parse_first_header(line: str) -> List[str]:
    """
    Parse the category header row.

    Quotes are removed, empty fields take the value of the previous field and
    whitespace inside a category becomes an underscore. A leading empty field
    has no predecessor and stays empty.

    >>> parse_first_header('"total cpu usage",,"memory usage",')
    ['total_cpu_usage', 'total_cpu_usage', 'memory_usage', 'memory_usage']
    """
    keys = []
    previous = ""
    for field in line.replace('"', "").split(","):
        key = _WHITESPACE.sub("_", field) if field else previous
        keys.append(key)
        previous = key
    return keys


def parse_second_header(line: str) -> List[str]:
    """
    Parse the metric header row.

    >>> parse_second_header('"usr","sys"')
    ['usr', 'sys']
    """
    return line.replace('"', "").split(",")


def decode_data_line(line: str, key_table: KeyTable) -> MetricData:
    """
    Decode one data row into `{category: {metric: value}}`.

    Values are kept as the raw strings found in the file. Columns beyond the
    shorter of the key table and the row are ignored.
    """
    values = line.split(",")
    data: MetricData = {}
    for index in range(min(key_table.width, len(values))):
        category = key_table.first_keys[index]
        metrics = data.get(category)
        if metrics is None:
            metrics = {}
            data[category] = metrics
        metrics[key_table.second_keys[index]] = values[index]
    return data


class DstatCsvDecoder:
    """
    Line-counter driven state machine over one sampler run.

    Lines 0 and 1 are ignored, lines 2 and 3 build the KeyTable and every
    later line is decoded as data. The KeyTable survives `reset_line_counter`;
    it is overwritten when the next run's header rows arrive.

    Attributes:
        key_table: Keys parsed from the most recent header rows.
        line_number: Index the next fed line will get.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or globals()["logger"]
        self.key_table = KeyTable()
        self.line_number = 0

    def feed(self, line: str) -> DecodedLine:
        """Process one line and advance the line counter."""
        index = self.line_number
        kind = classify_line(index)
        data = None

        if kind is LineKind.FIRST_HEADER:
            self.key_table = KeyTable(first_keys=parse_first_header(line),
                                      second_keys=self.key_table.second_keys)
            self.logger.debug(f"Parsed categories: {self.key_table.first_keys}")
        elif kind is LineKind.SECOND_HEADER:
            self.key_table = KeyTable(first_keys=self.key_table.first_keys,
                                      second_keys=parse_second_header(line))
            if len(self.key_table.first_keys) != len(self.key_table.second_keys):
                self.logger.warning(
                    f"Header rows differ in width: {len(self.key_table.first_keys)} categories, "
                    f"{len(self.key_table.second_keys)} metrics"
                )
            self.logger.info(f"Decoding dstat rows with {self.key_table.width} columns")
        elif kind is LineKind.DATA:
            data = decode_data_line(line, self.key_table)

        self.line_number += 1
        return DecodedLine(index=index, kind=kind, data=data)

    def reset_line_counter(self) -> None:
        """Start counting a new sampler run. The KeyTable is left as is."""
        self.line_number = 0
