"""
File helpers for the sampler output file.
"""

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def touch_or_truncate(path: Union[str, Path]) -> None:
    """Ensure `path` exists and is empty, creating it if it is missing."""
    path = Path(path)
    existed = path.exists()
    # "w" creates a missing file and truncates an existing one.
    with open(path, "w", encoding="utf-8"):
        pass
    logger.debug(f"{'Truncated' if existed else 'Created'} output file {path}")


def remove_file(path: Union[str, Path]) -> bool:
    """
    Delete `path`.

    Returns:
        True if the file was removed, False if it did not exist.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug(f"Output file {path} already removed")
        return False
    logger.info(f"Removed output file {path}")
    return True
