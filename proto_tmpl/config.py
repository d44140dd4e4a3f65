"""
Configuration management for template generation.

Merges settings from a JSON configuration file, the protoc parameter
string and explicit overrides, in increasing order of precedence.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Template files; the first one is executed for every proto file
    templates: List[str] = field(default_factory=list)

    # Extension of generated files; empty means detect from the template
    extension: str = ""

    # Root directory prefix for links between generated files
    root_dir: str = ""

    log_level: str = "WARNING"

    # Unrecognized keys, kept for templates and wrappers
    custom: Dict[str, Any] = field(default_factory=dict)


# Short names accepted in the protoc parameter string
PARAMETER_ALIASES = {
    "template": "templates",
    "ext": "extension",
    "root": "root_dir",
}

_KNOWN_FIELDS = {f.name for f in fields(GeneratorConfig)}


def parse_parameter(parameter: str) -> Dict[str, Any]:
    """
    Parse a protoc parameter string.

    The string is a comma-separated list of ``key=value`` pairs, as passed
    with ``--tmpl_out=key=value,...:outdir`` or ``--tmpl_opt``. The
    ``template`` key may be given several times. A key without a value
    is set to True.

    Args:
        parameter: Parameter string from the CodeGeneratorRequest

    Returns:
        Dictionary of settings, with aliases resolved
    """
    values: Dict[str, Any] = {}
    if not parameter:
        return values

    for chunk in parameter.split(","):
        if not chunk.strip():
            continue
        key, sep, value = chunk.partition("=")
        key = key.strip()
        if not key:
            continue
        key = PARAMETER_ALIASES.get(key, key)
        value = value.strip() if sep else True

        if key == "templates":
            values.setdefault("templates", []).append(value)
        else:
            values[key] = value

    return values


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    if not path.suffix.lower() == '.json':
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")

    logger.debug("Loaded configuration from %s", path)
    return config


def _normalize(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in config_dict.items():
        key = PARAMETER_ALIASES.get(key, key)
        if key == "templates" and isinstance(value, str):
            value = [value]
        result[key] = value
    return result


def _dict_to_config(config_dict: Dict[str, Any]) -> GeneratorConfig:
    """Convert dictionary to GeneratorConfig instance."""
    config_args = {}
    custom_args = {}

    for key, value in config_dict.items():
        if key in _KNOWN_FIELDS:
            config_args[key] = value
        else:
            custom_args[key] = value

    # Add custom fields to the custom dict
    if custom_args:
        existing_custom = dict(config_args.get('custom', {}))
        existing_custom.update(custom_args)
        config_args['custom'] = existing_custom

    config = GeneratorConfig(**config_args)
    validate_config(config)
    return config


def validate_config(config: GeneratorConfig):
    """
    Check a configuration for invalid values.

    Raises:
        ConfigError: If a setting has an invalid type or value
    """
    if not isinstance(config.templates, list) or not all(
        isinstance(t, str) for t in config.templates
    ):
        raise ConfigError("templates must be a list of file names")

    for name in ("extension", "root_dir"):
        if not isinstance(getattr(config, name), str):
            raise ConfigError(f"{name} must be a string")

    if not isinstance(config.log_level, str) or not isinstance(
        logging.getLevelName(config.log_level.upper()), int
    ):
        raise ConfigError(f"Invalid log level: {config.log_level}")


def load_config(
    parameter: Optional[str] = None,
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GeneratorConfig:
    """
    Build the configuration for a generation run.

    A ``config`` key in the parameter string names a configuration file
    when ``config_file`` is not given.

    Args:
        parameter: protoc parameter string
        config_file: Path to JSON configuration file
        overrides: Settings taking precedence over everything else

    Returns:
        Merged configuration
    """
    params = parse_parameter(parameter or "")
    config_file = config_file or params.pop("config", None)
    params.pop("config", None)
    if config_file is True:
        raise ConfigError("config parameter requires a file name")

    base_config: Dict[str, Any] = {}

    if config_file:
        base_config.update(_normalize(load_config_file(config_file)))

    base_config.update(params)

    if overrides:
        base_config.update(_normalize({k: v for k, v in overrides.items() if v is not None}))

    return _dict_to_config(base_config)
