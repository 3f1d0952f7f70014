"""
Single-threaded event loop running on a dedicated background thread.

The Reactor wraps an asyncio event loop. Watchers schedule their ticks on it,
so all pipeline state is mutated from one thread only. The host thread talks
to the reactor through `run_sync`, which marshals a call onto the loop and
waits for its result.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

from ..models.runtime import RuntimeConstants
from ..validation import ReactorFault
from .watchers import Watcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Reactor:
    """
    Cooperative event loop for file and timer watchers.

    Attributes:
        name: Name of the background thread running the loop.
    """

    def __init__(self, name: str = "dstat-reactor", logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or globals()["logger"]
        self._loop = asyncio.new_event_loop()
        self._loop.set_exception_handler(self._on_loop_exception)
        self._thread: Optional[threading.Thread] = None
        self._watchers: List[Watcher] = []
        self._fault: Optional[ReactorFault] = None
        self._started = threading.Event()

    # --- Watcher registry ---

    @property
    def watchers(self) -> List[Watcher]:
        return list(self._watchers)

    def attach(self, watcher: Watcher) -> Watcher:
        return watcher.attach(self)

    def _register(self, watcher: Watcher) -> None:
        self._watchers.append(watcher)

    def _unregister(self, watcher: Watcher) -> None:
        if watcher in self._watchers:
            self._watchers.remove(watcher)

    def detach_all(self) -> None:
        """Detach every watcher currently attached."""
        for watcher in list(self._watchers):
            watcher.detach()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)

    # --- Thread lifecycle ---

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and self._loop.is_running()

    def in_reactor_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def start(self) -> None:
        """Start the loop on its own daemon thread and wait until it is running."""
        if self._thread is not None:
            raise RuntimeError(f"Reactor '{self.name}' was already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        if not self._started.wait(timeout=RuntimeConstants.REACTOR_START_TIMEOUT):
            raise RuntimeError(f"Reactor '{self.name}' did not start in time")
        self.logger.info(f"Reactor '{self.name}' started")

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(self._started.set)
        try:
            self._loop.run_forever()
        except Exception as e:
            self._record_fault("event loop", e)
        finally:
            self.logger.debug(f"Reactor '{self.name}' loop exited")

    def stop(self) -> None:
        """
        Stop the loop and close it. Safe to call more than once and from any
        thread; when called from the reactor thread the loop stops after the
        current callback returns.
        """
        if self.in_reactor_thread():
            self._loop.stop()
            return

        if self._thread is not None and self._thread.is_alive():
            if not self._loop.is_closed():
                self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=RuntimeConstants.REACTOR_STOP_TIMEOUT)
            if self._thread.is_alive():
                self.logger.warning(f"Reactor '{self.name}' thread did not exit in time")
                return

        if not self._loop.is_closed():
            # Releases the files held by tailers still attached after a fault.
            self.detach_all()
            self._loop.close()
            self.logger.info(f"Reactor '{self.name}' stopped")

    def run_sync(self, func: Callable[..., T], *args: Any,
                 timeout: Optional[float] = RuntimeConstants.REACTOR_CALL_TIMEOUT) -> T:
        """
        Run `func(*args)` on the reactor thread and return its result.

        When the loop is not running, or when already on the reactor thread,
        the call happens directly in the caller's thread. Exceptions raised by
        `func` propagate to the caller.
        """
        if self.in_reactor_thread() or not self.is_running:
            return func(*args)

        future: "concurrent.futures.Future[T]" = concurrent.futures.Future()

        def runner() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(func(*args))
            except BaseException as e:
                future.set_exception(e)

        self._loop.call_soon_threadsafe(runner)
        return future.result(timeout=timeout)

    # --- Fault handling ---

    @property
    def fault(self) -> Optional[ReactorFault]:
        return self._fault

    def raise_if_faulted(self) -> None:
        if self._fault is not None:
            raise self._fault

    def report_fault(self, context: str, error: BaseException) -> None:
        """Record an unrecoverable error and stop the loop."""
        self._record_fault(context, error)
        if not self._loop.is_closed():
            self._loop.stop()

    def _record_fault(self, context: str, error: BaseException) -> None:
        self.logger.critical(
            f"Unexpected error in {context}; reactor '{self.name}' is stopping: {error}",
            exc_info=error,
        )
        if self._fault is None:
            self._fault = ReactorFault(context, error)

    def _on_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        error = context.get("exception")
        message = context.get("message", "unhandled loop exception")
        if error is None:
            error = RuntimeError(message)
        self.report_fault(message, error)
