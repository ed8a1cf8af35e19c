"""Configuration module for kdiff."""

from kdiff.config.settings import Settings
from kdiff.config.sources import (
    ConfigFileError,
    YamlLayersSettingsSource,
    builtin_defaults_path,
    deep_merge_dicts,
    default_user_config_path,
    project_config_path,
    read_config_file,
)
from kdiff.config.types import (
    ConfigBase,
    EngineConfig,
    LoggingConfig,
    OutputConfig,
)

__all__ = [
    "ConfigBase",
    "ConfigFileError",
    "EngineConfig",
    "LoggingConfig",
    "OutputConfig",
    "Settings",
    "YamlLayersSettingsSource",
    "builtin_defaults_path",
    "deep_merge_dicts",
    "default_user_config_path",
    "project_config_path",
    "read_config_file",
]
