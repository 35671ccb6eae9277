"""
Loading parameter values from YAML or JSON configuration files.

A config file holds a mapping of long names to values. Values are written
through the same targets the command line uses, so a later parse() overrides
anything read from the file.
"""

import json
import logging
import os
from collections.abc import Iterable
from typing import Any

import yaml
from result import Err

from .parameter import Parameter, TypedParameter

logger = logging.getLogger(__name__)


def load_config_file(config_path: str) -> dict[str, Any]:
    """
    Load configuration from a YAML or JSON file.

    Args:
        config_path (str): Path to the configuration file.

    Returns:
        dict[str, Any]: Dictionary containing the configuration data.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file format is not supported or invalid.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    file_ext = os.path.splitext(config_path)[1].lower()

    with open(config_path, "r") as f:
        if file_ext in [".yaml", ".yml"]:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML file: {e}")
        elif file_ext == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON file: {e}")
        else:
            raise ValueError(
                f"Unsupported file format: {file_ext}. "
                "Supported formats are: .yaml, .yml, .json"
            )

    # An empty YAML document loads as None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Configuration file must contain a mapping, got {type(data).__name__}"
        )
    return data


def validate_type(value: Any, arg_type: Any, field_name: str) -> None:
    """
    Validate that a non-string config value matches the expected type.

    Raises:
        TypeError: If the value is not of the expected type.
    """
    if arg_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(
                f"Field '{field_name}' expects int, got {type(value).__name__}: {value!r}"
            )
    elif arg_type is float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise TypeError(
                f"Field '{field_name}' expects float, got {type(value).__name__}: {value!r}"
            )
    elif arg_type is bool:
        if not isinstance(value, bool):
            raise TypeError(
                f"Field '{field_name}' expects bool, got {type(value).__name__}: {value!r}"
            )
    elif arg_type is str:
        if not isinstance(value, str):
            raise TypeError(
                f"Field '{field_name}' expects str, got {type(value).__name__}: {value!r}"
            )


def apply_config(params: Iterable[Parameter], config_data: dict[str, Any]) -> None:
    """
    Write config values into the targets of the matching parameters.

    String values go through the parameter's converter, except for booleans,
    which accept the usual spellings. Other values are type checked.

    Raises:
        ValueError: If a name is unknown or a string value does not convert.
        TypeError: If a non-string value has the wrong type.
    """
    by_name = {param.name: param for param in params}
    unknown = [name for name in config_data if name not in by_name]
    if unknown:
        raise ValueError(f"Unknown parameters in configuration: {', '.join(unknown)}")

    for name, value in config_data.items():
        param = by_name[name]
        if not isinstance(param, TypedParameter):
            raise TypeError(f"Parameter --{name} cannot be set from a config file")
        arg_type = param.value_type

        if isinstance(value, str) and arg_type is bool:
            value = _strict_bool(value, name)
        elif isinstance(value, str):
            converted = param.converter(value)
            if isinstance(converted, Err):
                raise ValueError(f"Field '{name}': {converted.err_value.detail}")
            value = converted.ok_value
        else:
            validate_type(value, arg_type, name)
            if arg_type in (int, float):
                # same range limits as the command line
                converted = param.converter(str(value))
                if isinstance(converted, Err):
                    raise ValueError(f"Field '{name}': {converted.err_value.detail}")
                value = converted.ok_value

        param.target.set(value)
        logger.debug("Config set %s = %r", param.target.describe(), value)


def _strict_bool(value: str, field_name: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Only accepts 'True', 'true', 'False', 'false', '1', '0' as valid values.
    """
    if value in ("True", "true", "1"):
        return True
    elif value in ("False", "false", "0"):
        return False
    else:
        raise ValueError(
            f"Field '{field_name}': invalid boolean value '{value}'. "
            "Must be one of: True, true, False, false, 1, 0"
        )
