# RFX Configuration Module
# YAML-based configuration loading, validation, and defaults

from rfx.config.defaults import DEFAULT_CONFIG, generate_default_config
from rfx.config.loader import (
    get_config_path,
    load_config,
    validate_config_file,
    write_default_config,
)
from rfx.config.schema import CommitConfig, DefaultsConfig, OutputConfig, RfxConfig

__all__ = [
    # Schema
    "RfxConfig",
    "DefaultsConfig",
    "CommitConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "get_config_path",
    "write_default_config",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
