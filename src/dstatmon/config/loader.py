"""
Reading config.toml from disk.

Only parsing happens here; turning sections into dataclasses is done by
`dstatmon.config.validators`.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ("general", "input", "tailing", "inject", "output")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse a TOML document.

    Args:
        file_path: Location of the document
        description: Name used in log and error messages

    Raises:
        FileNotFoundError: If `file_path` is missing
        tomllib.TOMLDecodeError: If the document is not valid TOML
    """
    path = Path(file_path)
    if not path.is_file():
        logger.error(f"Cannot read {description}: {path} does not exist")
        raise FileNotFoundError(f"{description} not found: {path}")

    logger.info(f"Reading {description} {path}")
    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            handle_config_error(
                e, f"parsing {path}",
                severity=ErrorSeverity.CRITICAL, reraise=True, logger=logger,
            )
            raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Parse config.toml and report sections nobody reads.

    Unknown tables are not an error, so a config written for a newer release
    still loads; they are only logged.
    """
    data = load_toml_file(config_path, "dstatmon configuration")
    for section in data:
        if section not in KNOWN_SECTIONS:
            logger.warning(f"Ignoring unknown section [{section}] in {config_path}")
    return data
