"""
Entry point object wiring the dstat input pipeline together.
"""

import logging
import subprocess
import time
from typing import Callable, List, Optional

from ..models.config import AppConfig
from ..parsing.dstat_csv import DstatCsvDecoder
from ..reactor.loop import Reactor
from ..sinks.base import RecordSink
from ..sinks.injector import RecordInjector
from ..system.commands import build_sampler_command, resolve_hostname
from ..validation import ErrorSeverity, handle_subprocess_error
from .line_processor import LineProcessor
from .process_manager import SamplerProcessManager
from .supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


class DstatInput:
    """
    Runs dstat and forwards its samples to a RecordSink.

    Usage:
        dstat_input = DstatInput(config, sink)
        dstat_input.start()
        ...
        dstat_input.shutdown()

    `configure()` runs the hostname command once and prepares the sampler
    command; `start()` calls it implicitly when needed.
    """

    def __init__(self, config: AppConfig, sink: RecordSink,
                 process_manager: Optional[SamplerProcessManager] = None,
                 clock: Callable[[], float] = time.time,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.sink = sink
        self.clock = clock
        self.logger = logger or globals()["logger"]
        self._process_manager = process_manager

        self.hostname: Optional[str] = None
        self.command: List[str] = []
        self.reactor: Optional[Reactor] = None
        self.processor: Optional[LineProcessor] = None
        self.supervisor: Optional[ProcessSupervisor] = None
        self._closed = False

    @property
    def configured(self) -> bool:
        return self.supervisor is not None

    @property
    def is_running(self) -> bool:
        return self.supervisor is not None and self.supervisor.is_running

    def configure(self) -> None:
        """
        Resolve the hostname and build the pipeline components.

        Raises:
            FileNotFoundError: If the hostname command does not exist
            RuntimeError: If the hostname command fails
            subprocess.TimeoutExpired: If the hostname command hangs
        """
        input_config = self.config.input
        hostname_args = input_config.hostname_args()
        try:
            self.hostname = resolve_hostname(hostname_args)
        except (OSError, RuntimeError, subprocess.SubprocessError) as e:
            handle_subprocess_error(
                e, input_config.hostname_command,
                severity=ErrorSeverity.CRITICAL, reraise=True, logger=self.logger,
            )
        self.command = build_sampler_command(input_config)

        injector = None
        if self.config.inject.enabled:
            injector = RecordInjector(self.config.inject)

        self.reactor = Reactor(name="dstat-reactor", logger=self.logger)
        self.processor = LineProcessor(
            DstatCsvDecoder(logger=self.logger),
            self.sink,
            tag=input_config.tag,
            hostname=self.hostname,
            injector=injector,
            clock=self.clock,
            logger=self.logger,
        )
        self.supervisor = ProcessSupervisor(
            self.command,
            input_config.tmp_file,
            self.processor,
            self.reactor,
            delay=input_config.delay,
            tailing=self.config.tailing,
            process_manager=self._process_manager,
            clock=self.clock,
            logger=self.logger,
        )
        self.logger.info(f"Configured dstat input: {' '.join(self.command)}")

    def start(self) -> None:
        """
        Start sampling.

        Raises:
            SamplerStartError: If dstat cannot be launched
        """
        if not self.configured:
            self.configure()
        self.supervisor.start()

    def shutdown(self) -> None:
        """Stop sampling, delete the output file and close the sink."""
        if self._closed:
            return
        self._closed = True
        try:
            if self.supervisor is not None:
                self.supervisor.shutdown()
        finally:
            self.sink.close()

    def raise_if_failed(self) -> None:
        """
        Raise the reactor fault, if any.

        Raises:
            ReactorFault: If the event loop stopped on an unexpected error
        """
        if self.reactor is not None:
            self.reactor.raise_if_faulted()
