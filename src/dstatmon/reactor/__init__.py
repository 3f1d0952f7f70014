"""
Event loop and periodic watchers.

- Reactor: asyncio loop on a dedicated thread
- Watcher: attachable periodic callback
- TimerWatcher: repeating timer driving a PeriodicTask
"""

from .loop import Reactor
from .watchers import PeriodicTask, TimerWatcher, Watcher

__all__ = [
    "PeriodicTask",
    "Reactor",
    "TimerWatcher",
    "Watcher",
]
