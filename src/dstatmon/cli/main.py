"""
Command-line interface for the dstatmon application.

This module loads the configuration, starts the dstat input with the
configured sink and keeps it running until SIGINT/SIGTERM or until the
event loop fails.
"""

import argparse
import logging
import signal
import subprocess
import sys
import threading
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..models.runtime import RuntimeConstants
from ..orchestration.dstat_input import DstatInput
from ..sinks.factory import create_sink
from ..system.commands import check_sampler_installed
from ..validation import (
    ReactorFault,
    SamplerStartError,
    ValidationError,
    handle_cli_error,
    validate_enum_choice,
)
from ..config.validators import VALID_LOG_LEVELS, VALID_OUTPUT_TYPES

# --- Logging Setup ---
# Records may be written to stdout, so logs go to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run dstat and stream its samples as structured records."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml. Defaults to conf/config.toml in the repository.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help=f"Override [general].log_level. One of {VALID_LOG_LEVELS}.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help=f"Override [output].type. One of {VALID_OUTPUT_TYPES}.",
    )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> int:
    """
    Main command-line interface for the dstatmon application.

    Returns:
        Process exit code: 0 after a clean shutdown, 1 when the event loop
        failed.

    Raises:
        SystemExit: On configuration errors or when dstat cannot be started.
    """
    args = build_parser().parse_args(argv)

    if args.config:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    try:
        if args.log_level:
            app_config.log_level = validate_enum_choice(
                args.log_level, VALID_LOG_LEVELS,
                field_name="--log-level", case_sensitive=False,
            )
        if args.output:
            app_config.output.type = validate_enum_choice(
                args.output, VALID_OUTPUT_TYPES, field_name="--output"
            )
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=1, logger=logger)

    logging.getLogger().setLevel(app_config.log_level)

    if not check_sampler_installed(app_config.input.dstat_path):
        logger.error(
            f"Sampler '{app_config.input.dstat_path}' was not found. "
            "Please install it (e.g., 'sudo apt-get install dstat') or "
            "set [input].dstat_path in config.toml."
        )
        return 1

    stop_requested = threading.Event()

    def signal_handler(signum, frame):
        if stop_requested.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Initiating graceful shutdown...")
        stop_requested.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    dstat_input = DstatInput(app_config, create_sink(app_config.output))
    exit_code = 0
    try:
        dstat_input.start()
        logger.info(f"Collecting dstat samples with tag '{app_config.input.tag}'")
        while not stop_requested.wait(RuntimeConstants.CLI_HEALTH_CHECK_INTERVAL):
            dstat_input.raise_if_failed()
    except ReactorFault as e:
        logger.critical(f"Metric collection stopped: {e}")
        exit_code = 1
    except (SamplerStartError, OSError, RuntimeError, subprocess.SubprocessError) as e:
        handle_cli_error(error=e, context="starting dstat input", exit_code=1, logger=logger)
    finally:
        dstat_input.shutdown()

    logger.info("dstatmon stopped")
    return exit_code


def main() -> None:
    sys.exit(main_cli())


if __name__ == "__main__":
    main()
