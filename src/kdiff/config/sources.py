"""Layered YAML settings source for kdiff.

Three config files feed Settings, lowest precedence first:

1. the bundled defaults/config.yaml (must exist and be non-empty)
2. the user file, $KDIFF_CONFIG_DIR/config.yaml or ~/.config/kdiff/config.yaml
3. the project file, .kdiff/config.yaml under the working directory

Mappings merge key by key across layers; any other value in a higher layer
replaces the lower one outright. Environment variables and constructor
arguments sit above all three and are handled by pydantic-settings.
"""

import copy as _copy
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import kdiff.errors as errors

_logger = _logging.getLogger(__name__)

ENV_CONFIG_DIR = "KDIFF_CONFIG_DIR"
CONFIG_FILENAME = "config.yaml"


class ConfigFileError(errors.KdiffError):
    """A config file could not be read or is not a YAML mapping."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def builtin_defaults_path() -> _pathlib.Path:
    """The defaults file shipped inside the package."""
    return _pathlib.Path(__file__).parent / "defaults" / CONFIG_FILENAME


def default_user_config_path() -> _pathlib.Path:
    """The per-user config file; KDIFF_CONFIG_DIR moves its directory."""
    config_dir = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir:
        return _pathlib.Path(config_dir) / CONFIG_FILENAME
    return _pathlib.Path.home() / ".config" / "kdiff" / CONFIG_FILENAME


def project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """The project config file under project_root."""
    return project_root / ".kdiff" / CONFIG_FILENAME


def deep_merge_dicts(
    base: dict[str, _typing.Any],
    override: dict[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Return base with override merged on top; neither input is modified.

    Nested dicts merge recursively. Lists and scalars replace.
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge_dicts(result[key], value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


def read_config_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Parse one config file. An empty file yields {}.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, or
            its top level is not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        data = _yaml.safe_load(text)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            path, f"config must be a YAML mapping, got {type(data).__name__}"
        )
    return data


class YamlLayersSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    pydantic-settings source backed by the layered config files.

    The user and builtin paths can be overridden, which tests use to point
    the source at temporary files.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        builtin = builtin_config_path or builtin_defaults_path()
        if not builtin.is_file():
            raise ConfigFileError(builtin, "built-in defaults not found (broken installation?)")
        merged = read_config_file(builtin)
        if not merged:
            raise ConfigFileError(builtin, "built-in defaults file is empty (broken installation?)")

        optional = [user_config_path or default_user_config_path()]
        if project_root is not None:
            optional.append(project_config_path(project_root))
        for path in optional:
            if path.is_file():
                _logger.debug("Merging config from %s", path)
                merged = deep_merge_dicts(merged, read_config_file(path))

        self._merged = merged

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._merged.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """The merged config; unknown keys end up in Settings.model_extra."""
        return _copy.deepcopy(self._merged)
