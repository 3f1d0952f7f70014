"""
Process-wide access to the loaded configuration.

The configuration is parsed and validated on first use and cached until the
path changes or the cache is cleared explicitly.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, ValidationError, handle_config_error
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

_CONFIG: Optional[AppConfig] = None

# <repo>/conf/config.toml; the CLI `--config` flag and tests point elsewhere.
_CONFIG_FILE_PATH = Path(__file__).resolve().parents[3] / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """Use `config_path` from now on and drop the cached configuration."""
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Using configuration file {_CONFIG_FILE_PATH}")


def clear_config_cache() -> None:
    global _CONFIG
    _CONFIG = None
    logger.debug("Cached configuration dropped")


def _load_config(config_path: Path) -> AppConfig:
    try:
        app_config = validate_app_config(load_main_config(config_path))
    except ValidationError as e:
        handle_config_error(
            e, f"validating {config_path} ({e.field_name or 'document'})",
            severity=ErrorSeverity.CRITICAL, reraise=True, logger=logger,
        )
        raise
    except FileNotFoundError as e:
        handle_config_error(
            e, "locating config.toml",
            severity=ErrorSeverity.CRITICAL, reraise=True, logger=logger,
        )
        raise

    logger.info(
        f"Configuration loaded: tag '{app_config.input.tag}', "
        f"sampler '{app_config.input.dstat_path}', output '{app_config.output.type}'"
    )
    return app_config


def get_config() -> AppConfig:
    """
    Return the cached AppConfig, loading it on first access.

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If a setting is invalid
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None


def get_config_info() -> Dict[str, Any]:
    """Summarize the configuration state for diagnostics."""
    info: Dict[str, Any] = {
        "config_loaded": _CONFIG is not None,
        "config_path": str(_CONFIG_FILE_PATH),
    }
    if _CONFIG is not None:
        info.update(
            tag=_CONFIG.input.tag,
            tmp_file=str(_CONFIG.input.tmp_file),
            delay=_CONFIG.input.delay,
            output_type=_CONFIG.output.type,
        )
    return info
