"""
Abstract base class for record sinks.

A sink receives every decoded record together with the tag and event time.
What happens afterwards (printing, buffering, writing to disk) is up to the
implementation; the tailing pipeline gives no delivery guarantee.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class RecordSink(ABC):
    """Abstract base class for record sink implementations."""

    @abstractmethod
    def emit(self, tag: str, time: float, record: Dict[str, Any]) -> None:
        """
        Deliver one record.

        Args:
            tag: Tag configured for the input
            time: Event time as epoch seconds
            record: Record payload
        """
        pass

    def close(self) -> None:
        """Flush and release resources. Called once on shutdown."""
