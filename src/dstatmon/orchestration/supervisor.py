"""
Supervision of the sampler and the watchers tailing its output.
"""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..models.config import TailingConfig
from ..models.runtime import SubprocessHandle
from ..reactor.loop import Reactor
from ..reactor.watchers import TimerWatcher
from ..system.files import remove_file, touch_or_truncate
from ..tailing.file_tailer import FileTailer
from ..validation import ErrorSeverity, handle_file_error
from .line_processor import LineProcessor
from .process_manager import SamplerProcessManager
from .rotation import RotationManager
from .staleness import StalenessMonitor

logger = logging.getLogger(__name__)


class ProcessSupervisor:
    """
    Owns the sampler process, the FileTailer and the staleness timer.

    Lifecycle:
        start()    - empty the output file, spawn the sampler, attach the
                     watchers and start the reactor thread
        restart()  - replace sampler, tailer and timer (runs on the reactor)
        shutdown() - terminate the sampler, detach watchers, stop the reactor
                     and delete the output file; only the first call acts

    Restart and rotation mutate watchers and decoder state, so both always
    execute on the reactor thread.
    """

    def __init__(self, command: List[str], output_file: Path, processor: LineProcessor,
                 reactor: Reactor, delay: int,
                 tailing: Optional[TailingConfig] = None,
                 process_manager: Optional[SamplerProcessManager] = None,
                 clock: Callable[[], float] = time.time,
                 logger: Optional[logging.Logger] = None):
        self.command = list(command)
        self.output_file = Path(output_file)
        self.processor = processor
        self.reactor = reactor
        self.tailing = tailing or TailingConfig()
        self.logger = logger or globals()["logger"]
        self.process_manager = process_manager or SamplerProcessManager(
            terminate_timeout=self.tailing.terminate_timeout, logger=self.logger
        )

        self.rotation = RotationManager(
            self.output_file, owner=self, max_lines=self.tailing.max_lines, logger=self.logger
        )
        self.processor.rotation = self.rotation
        self.staleness = StalenessMonitor(
            source=processor,
            target=self,
            threshold=delay * self.tailing.staleness_factor,
            clock=clock,
            logger=self.logger,
        )

        self.handle: Optional[SubprocessHandle] = None
        self.tailer: Optional[FileTailer] = None
        self.timer: Optional[TimerWatcher] = None
        self.restart_count = 0
        self._started = False
        self._shut_down = False

    @property
    def pid(self) -> Optional[int]:
        return self.handle.pid if self.handle else None

    @property
    def is_running(self) -> bool:
        return self._started and not self._shut_down and self.reactor.is_running

    # --- Watchers ---

    def attach_tailer(self) -> None:
        self.tailer = FileTailer(
            self.output_file, self.processor,
            interval=self.tailing.poll_interval, logger=self.logger,
        )
        self.tailer.attach(self.reactor)

    def detach_tailer(self) -> None:
        if self.tailer is not None:
            self.tailer.detach()

    def attach_timer(self) -> None:
        self.timer = TimerWatcher(
            self.tailing.check_interval, self.staleness,
            name="StalenessTimer", logger=self.logger,
        )
        self.timer.attach(self.reactor)

    def detach_timer(self) -> None:
        if self.timer is not None:
            self.timer.detach()

    def _detach_watchers(self) -> None:
        self.detach_tailer()
        self.detach_timer()

    # --- Lifecycle ---

    def start(self) -> None:
        """
        Launch the sampler and begin tailing.

        Raises:
            SamplerStartError: If the sampler cannot be launched
            RuntimeError: If the supervisor was already started
        """
        if self._started:
            raise RuntimeError("ProcessSupervisor was already started")
        touch_or_truncate(self.output_file)
        self.handle = self.process_manager.spawn(self.command, self.output_file)
        self.processor.reset()
        self.attach_tailer()
        self.attach_timer()
        self.reactor.start()
        self._started = True
        self.logger.info(f"Tailing {self.output_file} (sampler PID: {self.pid})")

    def restart(self) -> None:
        """Replace the sampler run. Executes on the reactor thread."""
        self.reactor.run_sync(self._restart)

    def _restart(self) -> None:
        old_pid = self.pid
        self.logger.info(f"Restarting sampler (PID: {old_pid})")

        self._detach_watchers()
        try:
            self._stop_sampler()
            self.processor.reset()
            touch_or_truncate(self.output_file)
            self.handle = self.process_manager.spawn(self.command, self.output_file)
        finally:
            # The timer goes first: it is what retries a failed restart.
            self.attach_timer()
            try:
                self.attach_tailer()
            except OSError as e:
                handle_file_error(
                    e, f"tailing {self.output_file}",
                    severity=ErrorSeverity.ERROR, reraise=False, logger=self.logger,
                )
        self.restart_count += 1
        self.logger.info(f"Sampler restarted (PID: {old_pid} -> {self.pid})")

    def _stop_sampler(self) -> None:
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        self.process_manager.terminate(handle)
        self.process_manager.detach(handle)

    def _stop_all(self) -> None:
        self._stop_sampler()
        self._detach_watchers()

    def shutdown(self) -> None:
        """Stop everything and delete the output file. Later calls do nothing."""
        if self._shut_down:
            return
        self._shut_down = True
        self.logger.info("Shutting down sampler supervisor")

        self.reactor.run_sync(self._stop_all)
        self.reactor.stop()
        try:
            remove_file(self.output_file)
        except OSError as e:
            handle_file_error(
                e, f"removing {self.output_file}",
                severity=ErrorSeverity.WARNING, reraise=False, logger=self.logger,
            )
        self.process_manager.join_reapers(timeout=self.tailing.terminate_timeout)
