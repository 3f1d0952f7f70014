"""
Factory for creating record sinks.
"""

import logging
from typing import Optional, TextIO

from ..models.config import OutputConfig
from .base import RecordSink
from .jsonl import JsonLinesSink
from .parquet import ParquetSink

logger = logging.getLogger(__name__)


def create_sink(output_config: OutputConfig, stream: Optional[TextIO] = None) -> RecordSink:
    """
    Create a sink for the configured output type.

    Args:
        output_config: Validated `[output]` settings
        stream: Stream for the stdout sink (defaults to sys.stdout)

    Raises:
        ValueError: If an unsupported output type is specified
    """
    if output_config.type == "stdout":
        logger.debug("Creating JsonLinesSink")
        return JsonLinesSink(stream)
    elif output_config.type == "parquet":
        logger.debug(f"Creating ParquetSink at {output_config.path}")
        return ParquetSink(
            output_config.path,
            compression=output_config.compression,
            flush_every=output_config.flush_every,
        )
    else:
        raise ValueError(f"Unsupported output type: {output_config.type}")
