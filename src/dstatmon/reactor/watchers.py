"""
Watchers scheduled on the Reactor.

A watcher is a periodic callback that can be attached to and detached from a
Reactor. Two kinds exist: size-polling file watchers (see
`dstatmon.tailing.file_tailer.FileTailer`) and plain periodic timers.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import asyncio

    from .loop import Reactor

logger = logging.getLogger(__name__)


class PeriodicTask(Protocol):
    """Capability invoked on every tick of a TimerWatcher."""

    def run(self) -> None:
        ...


class Watcher(ABC):
    """
    Base class for periodic callbacks owned by a Reactor.

    Every tick is scheduled with `Reactor.call_later`, so ticks always run on
    the reactor thread. A tick that detaches its own watcher is the last one:
    the watcher only reschedules itself while still attached.

    Attributes:
        interval: Seconds between ticks.
        name: Human readable name used in log messages.
    """

    def __init__(self, interval: float, name: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        if interval <= 0:
            raise ValueError(f"Watcher interval must be positive, got {interval}")
        self.interval = interval
        self.name = name or self.__class__.__name__
        self.logger = logger or globals()["logger"]
        self._reactor: Optional["Reactor"] = None
        self._handle: Optional["asyncio.TimerHandle"] = None
        self.tick_count = 0

    @property
    def attached(self) -> bool:
        return self._reactor is not None

    @property
    def reactor(self) -> Optional["Reactor"]:
        return self._reactor

    def attach(self, reactor: "Reactor") -> "Watcher":
        """Register with `reactor` and schedule the first tick."""
        if self._reactor is not None:
            raise RuntimeError(f"{self.name} is already attached")
        self._reactor = reactor
        reactor._register(self)
        self._schedule()
        self.logger.debug(f"{self.name} attached (interval {self.interval}s)")
        return self

    def detach(self) -> None:
        """Cancel the pending tick and unregister. Detaching twice is a no-op."""
        if self._reactor is None:
            return
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        reactor, self._reactor = self._reactor, None
        reactor._unregister(self)
        self.on_detach()
        self.logger.debug(f"{self.name} detached")

    def _schedule(self) -> None:
        self._handle = self._reactor.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._reactor is None:
            return
        self.tick_count += 1
        try:
            self.on_tick()
        except Exception as e:
            self.handle_tick_error(e)
        if self._reactor is not None and self._handle is None:
            self._schedule()

    def handle_tick_error(self, error: Exception) -> None:
        """
        Called when `on_tick` raises. By default the error is a reactor fault
        and stops the loop.
        """
        if self._reactor is not None:
            self._reactor.report_fault(f"{self.name} tick", error)
        else:
            raise error

    def on_detach(self) -> None:
        """Hook for releasing resources when the watcher is detached."""

    @abstractmethod
    def on_tick(self) -> None:
        """Perform one unit of periodic work."""


class TimerWatcher(Watcher):
    """
    Repeating timer that delegates each tick to a PeriodicTask.

    A failing task is logged and the timer keeps running.
    """

    def __init__(self, interval: float, task: PeriodicTask, name: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(interval, name=name or f"TimerWatcher({type(task).__name__})",
                         logger=logger)
        self.task = task
        self.error_count = 0

    def on_tick(self) -> None:
        self.task.run()

    def handle_tick_error(self, error: Exception) -> None:
        self.error_count += 1
        self.logger.error(f"{self.name} task failed: {error}", exc_info=error)
