"""
Data structures produced by the CSV decoding pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

# category -> metric -> raw sampled value
MetricData = Dict[str, Dict[str, str]]


@dataclass
class KeyTable:
    """
    Composite keys derived from the two dstat header rows.

    `first_keys[i]` is the category and `second_keys[i]` the metric of the
    i-th column of every data row.
    """

    first_keys: List[str] = field(default_factory=list)
    second_keys: List[str] = field(default_factory=list)

    @property
    def width(self) -> int:
        """Number of columns that can be decoded with both keys present."""
        return min(len(self.first_keys), len(self.second_keys))


@dataclass
class Record:
    """A decoded sample row ready to be handed to a sink."""

    hostname: str
    data: MetricData

    def to_dict(self) -> Dict[str, Any]:
        return {"hostname": self.hostname, "dstat": self.data}
