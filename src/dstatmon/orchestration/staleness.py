"""
Liveness check for the sampler based on output freshness.
"""

import logging
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 1.0
DEFAULT_STALENESS_FACTOR = 3


class LastLineSource(Protocol):
    """Anything exposing the time of the most recently processed line."""

    @property
    def last_line_time(self) -> float:
        ...


class Restartable(Protocol):
    def restart(self) -> None:
        ...


class StalenessMonitor:
    """
    Periodic task restarting the sampler when its output goes quiet.

    The monitor is driven by a TimerWatcher; errors raised here are logged by
    the timer and the next tick evaluates staleness again.

    Attributes:
        threshold: Seconds without a new line before the run is stale.
    """

    def __init__(self, source: LastLineSource, target: Restartable, threshold: float,
                 clock: Callable[[], float] = time.time,
                 logger: Optional[logging.Logger] = None):
        self.source = source
        self.target = target
        self.threshold = threshold
        self.clock = clock
        self.logger = logger or globals()["logger"]
        self.restarts = 0

    def idle_seconds(self) -> float:
        return self.clock() - self.source.last_line_time

    def is_stale(self) -> bool:
        return self.idle_seconds() > self.threshold

    def run(self) -> None:
        idle = self.idle_seconds()
        if idle <= self.threshold:
            return
        self.logger.warning(
            f"No sampler output for {idle:.1f}s (threshold {self.threshold:.1f}s), restarting"
        )
        self.restarts += 1
        self.target.restart()
