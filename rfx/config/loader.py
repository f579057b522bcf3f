# RFX Configuration Loader
# Load, write, and validate YAML configuration files

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from rfx.config.defaults import generate_default_config
from rfx.config.schema import RfxConfig


def get_config_dir() -> Path:
    """Get the rfx configuration directory."""
    return Path.home() / ".config" / "rfx"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("RFX_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> RfxConfig:
    """
    Load configuration from YAML file.

    A missing file is not an error: rfx runs on built-in defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        RfxConfig: Validated configuration object.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValidationError: If the file doesn't match the schema.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return RfxConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return RfxConfig.model_validate(data)


def write_default_config(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Write the commented default configuration.

    Args:
        config_path: Target path. Uses default if not provided.
        force: Overwrite an existing file.

    Returns:
        Tuple of (config_path, was_written).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    try:
        RfxConfig.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    return True, []
