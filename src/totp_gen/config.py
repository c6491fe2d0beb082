"""User-level defaults for the totp-gen command line."""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from platformdirs import user_config_dir

from totp_gen.errors import UnsupportedAlgorithm
from totp_gen.hotp import MAX_DIGITS, resolve_algorithm


logger = logging.getLogger(__name__)

APP_NAME = "totp-gen"
APP_AUTHOR = "totp-gen"
CONFIG_FILE = "config.json"

DEFAULTS: Dict[str, Any] = {
    "algorithm": "SHA1",
    "digits": 6,
    "period": 30,
    "issuer": None,
}

# Converters used when values arrive as text from the command line
_CONVERTERS = {
    "algorithm": str,
    "digits": int,
    "period": int,
    "issuer": str,
}


class ConfigError(ValueError):
    """The configuration file or a configuration value is invalid."""


def get_config_dir() -> Path:
    """
    Get the cross-platform config directory.

    Returns:
        Path to the config directory.
    """
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def get_config_path() -> Path:
    """Get the path of the JSON config file."""
    return get_config_dir() / CONFIG_FILE


def read_config() -> Dict[str, Any]:
    """
    Read the raw config file.

    Returns:
        The stored settings, or an empty dict if no file exists.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid config file format: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    return data


def _check_value(key: str, value: Any) -> Any:
    """
    Check one setting's type and range.

    Raises:
        ConfigError: If the value would break code generation.
    """
    if key == "issuer":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"issuer must be a string, got {value!r}")
    elif key == "algorithm":
        if not isinstance(value, str):
            raise ConfigError(f"algorithm must be a string, got {value!r}")
        try:
            resolve_algorithm(value)
        except UnsupportedAlgorithm as e:
            raise ConfigError(str(e)) from e
    else:
        # bool is an int subclass; JSON true/false are not valid numbers here
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        if key == "digits" and not 1 <= value <= MAX_DIGITS:
            raise ConfigError(f"digits must be between 1 and {MAX_DIGITS}, got {value}")
        if key == "period" and value <= 0:
            raise ConfigError(f"period must be positive, got {value}")
    return value


def load_config() -> Dict[str, Any]:
    """
    Load settings, falling back to built-in defaults for missing keys.

    Unknown keys in the file are ignored.

    Raises:
        ConfigError: If the file is malformed or holds an invalid value.
    """
    settings = dict(DEFAULTS)
    for key, value in read_config().items():
        if key in DEFAULTS:
            settings[key] = _check_value(key, value)
        else:
            logger.debug("Ignoring unknown config key %r", key)
    return settings


def set_value(key: str, value: str) -> Dict[str, Any]:
    """
    Persist one setting.

    Args:
        key: Setting name, one of DEFAULTS.
        value: Text value, converted to the setting's type.

    Returns:
        The stored settings after the update.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.
    """
    if key not in _CONVERTERS:
        raise ConfigError(
            f"Unknown config key {key!r}; expected one of {', '.join(sorted(_CONVERTERS))}"
        )
    try:
        converted = _CONVERTERS[key](value)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e
    _check_value(key, converted)

    data = read_config()
    data[key] = converted
    save_config(data)
    return data


def save_config(data: Dict[str, Any]) -> None:
    """
    Save settings to disk.

    Args:
        data: Settings dictionary.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Write atomically using a temporary file
    temp_path = config_path.with_suffix(".tmp")
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    temp_path.replace(config_path)
    logger.debug("Saved config to %s", config_path)
