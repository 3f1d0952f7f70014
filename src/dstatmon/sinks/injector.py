"""
Injection of hostname, tag and time fields into outgoing records.
"""

import socket
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models.config import InjectConfig


class RecordInjector:
    """
    Adds configured metadata fields to a copy of each record.

    A field is only added when its key is configured. The injected hostname
    comes from the system, independent of the hostname command output stored
    in the record itself.
    """

    def __init__(self, config: InjectConfig, hostname: Optional[str] = None):
        self.config = config
        self.hostname = hostname or socket.gethostname()

    def format_time(self, time: float) -> Any:
        if self.config.time_type == "unixtime":
            return int(time)
        if self.config.time_type == "string":
            if self.config.utc:
                moment = datetime.fromtimestamp(time, tz=timezone.utc)
            else:
                moment = datetime.fromtimestamp(time).astimezone()
            return moment.strftime(self.config.time_format)
        return time

    def inject(self, tag: str, time: float, record: Dict[str, Any]) -> Dict[str, Any]:
        if not self.config.enabled:
            return record
        injected = dict(record)
        if self.config.hostname_key:
            injected[self.config.hostname_key] = self.hostname
        if self.config.tag_key:
            injected[self.config.tag_key] = tag
        if self.config.time_key:
            injected[self.config.time_key] = self.format_time(time)
        return injected
