"""
Parsing of dstat CSV header and data rows.
"""

from .dstat_csv import (
    DecodedLine,
    DstatCsvDecoder,
    LineKind,
    classify_line,
    decode_data_line,
    parse_first_header,
    parse_second_header,
)

__all__ = [
    "DecodedLine",
    "DstatCsvDecoder",
    "LineKind",
    "classify_line",
    "decode_data_line",
    "parse_first_header",
    "parse_second_header",
]
