"""
Configuration validation utilities.

This module turns raw TOML sections into validated configuration dataclasses,
filling in defaults for every optional setting.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import AppConfig, InjectConfig, InputConfig, OutputConfig, TailingConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_non_empty_string,
    validate_option_string,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

logger = logging.getLogger(__name__)

VALID_TIME_TYPES = ["float", "unixtime", "string"]
VALID_OUTPUT_TYPES = ["stdout", "parquet"]
VALID_COMPRESSIONS = ["snappy", "gzip", "brotli", "lz4", "zstd"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(f"[{name}] must be a table", field_name=name, value=section)
    return section


def validate_input_config(input_data: Dict[str, Any]) -> InputConfig:
    """
    Validate and create an InputConfig from the raw `[input]` section.

    Args:
        input_data: Raw input configuration from TOML

    Returns:
        Validated InputConfig instance

    Raises:
        ValidationError: If validation fails
    """
    if "tag" not in input_data:
        raise ValidationError("input.tag is required", field_name="input.tag")

    tag = validate_non_empty_string(input_data["tag"], field_name="input.tag")

    dstat_path = validate_simple_command(
        input_data.get("dstat_path", "dstat"), field_name="input.dstat_path"
    )

    option = validate_option_string(
        input_data.get("option", "-fcdnm"), field_name="input.option"
    )

    delay = validate_positive_integer(
        input_data.get("delay", 1),
        min_value=1,
        max_value=3600,
        field_name="input.delay",
    )

    tmp_file_str = validate_non_empty_string(
        input_data.get("tmp_file", "/tmp/dstat.csv"), field_name="input.tmp_file"
    )
    tmp_file = Path(tmp_file_str)
    if not tmp_file.parent.is_dir():
        raise ValidationError(
            f"input.tmp_file directory does not exist: {tmp_file.parent}",
            field_name="input.tmp_file",
            value=tmp_file_str,
        )

    hostname_command = validate_simple_command(
        input_data.get("hostname_command", "hostname"),
        field_name="input.hostname_command",
    )

    return InputConfig(
        tag=tag,
        dstat_path=dstat_path,
        option=option,
        delay=delay,
        tmp_file=tmp_file,
        hostname_command=hostname_command,
    )


def validate_tailing_config(tailing_data: Dict[str, Any]) -> TailingConfig:
    """
    Validate and create a TailingConfig from the raw `[tailing]` section.

    Raises:
        ValidationError: If validation fails
    """
    poll_interval = validate_positive_float(
        tailing_data.get("poll_interval", 0.5),
        min_value=0.01,
        max_value=60.0,
        field_name="tailing.poll_interval",
    )

    # A rotation period of one line would truncate the header rows away.
    max_lines = validate_positive_integer(
        tailing_data.get("max_lines", 100),
        min_value=2,
        max_value=10_000_000,
        field_name="tailing.max_lines",
    )

    check_interval = validate_positive_float(
        tailing_data.get("check_interval", 1.0),
        min_value=0.01,
        max_value=60.0,
        field_name="tailing.check_interval",
    )

    staleness_factor = validate_positive_integer(
        tailing_data.get("staleness_factor", 3),
        min_value=1,
        max_value=100,
        field_name="tailing.staleness_factor",
    )

    terminate_timeout = validate_positive_float(
        tailing_data.get("terminate_timeout", 5.0),
        min_value=0.1,
        max_value=300.0,
        field_name="tailing.terminate_timeout",
    )

    return TailingConfig(
        poll_interval=poll_interval,
        max_lines=max_lines,
        check_interval=check_interval,
        staleness_factor=staleness_factor,
        terminate_timeout=terminate_timeout,
    )


def validate_inject_config(inject_data: Dict[str, Any]) -> InjectConfig:
    """
    Validate and create an InjectConfig from the raw `[inject]` section.

    Raises:
        ValidationError: If validation fails
    """
    keys = {}
    for key_name in ("hostname_key", "tag_key", "time_key"):
        value = inject_data.get(key_name, "")
        if not isinstance(value, str):
            raise ValidationError(
                f"inject.{key_name} must be a string",
                field_name=f"inject.{key_name}",
                value=value,
            )
        keys[key_name] = value

    time_type = validate_enum_choice(
        inject_data.get("time_type", "float"),
        valid_choices=VALID_TIME_TYPES,
        field_name="inject.time_type",
    )

    time_format = inject_data.get("time_format", "%Y-%m-%dT%H:%M:%S%z")
    if time_type == "string":
        validate_non_empty_string(time_format, field_name="inject.time_format")

    utc = validate_boolean(inject_data.get("utc", False), field_name="inject.utc")

    return InjectConfig(
        time_type=time_type,
        time_format=time_format,
        utc=utc,
        **keys,
    )


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    """
    Validate and create an OutputConfig from the raw `[output]` section.

    Raises:
        ValidationError: If validation fails
    """
    output_type = validate_enum_choice(
        output_data.get("type", "stdout"),
        valid_choices=VALID_OUTPUT_TYPES,
        field_name="output.type",
    )

    path = Path(
        validate_non_empty_string(
            output_data.get("path", "dstat.parquet"), field_name="output.path"
        )
    )

    compression = validate_enum_choice(
        output_data.get("compression", "snappy"),
        valid_choices=VALID_COMPRESSIONS,
        field_name="output.compression",
    )

    flush_every = validate_positive_integer(
        output_data.get("flush_every", 100),
        min_value=1,
        max_value=1_000_000,
        field_name="output.flush_every",
    )

    return OutputConfig(
        type=output_type,
        path=path,
        compression=compression,
        flush_every=flush_every,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole configuration document.

    Args:
        config_data: Parsed TOML document

    Returns:
        Fully validated AppConfig instance

    Raises:
        ValidationError: If any section fails validation
    """
    input_config = validate_input_config(_section(config_data, "input"))
    tailing_config = validate_tailing_config(_section(config_data, "tailing"))
    inject_config = validate_inject_config(_section(config_data, "inject"))
    output_config = validate_output_config(_section(config_data, "output"))

    log_level = validate_enum_choice(
        _section(config_data, "general").get("log_level", "INFO"),
        valid_choices=VALID_LOG_LEVELS,
        field_name="general.log_level",
        case_sensitive=False,
    )

    logger.debug(
        f"Validated configuration: tag={input_config.tag}, "
        f"delay={input_config.delay}s, output={output_config.type}"
    )

    return AppConfig(
        input=input_config,
        tailing=tailing_config,
        inject=inject_config,
        output=output_config,
        log_level=log_level,
    )
