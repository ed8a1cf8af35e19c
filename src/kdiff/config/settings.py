"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with KDIFF_ prefix
3. Layered YAML config files:
   - Project config: .kdiff/config.yaml under the working directory (highest)
   - User config: ~/.config/kdiff/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  KDIFF_ENGINE__TIMEOUT_SECONDS=300
  KDIFF_OUTPUT__FORMAT=json
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import kdiff.config.sources as sources
import kdiff.config.types as types


class Settings(_pydantic_settings.BaseSettings):
    """
    kdiff configuration settings.

    Settings are organized into nested sections:
    - engine: how the overlay-build engine is invoked
    - output: report format and final-output display
    - logging: log level
    """

    version: int = 1
    """Config file format version."""

    engine: types.EngineConfig = _pydantic.Field(default_factory=types.EngineConfig)
    output: types.OutputConfig = _pydantic.Field(default_factory=types.OutputConfig)
    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="KDIFF_",
        env_nested_delimiter="__",  # KDIFF_OUTPUT__FORMAT
        extra="allow",  # Preserve unknown fields so they can be reported
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings: constructor args, highest
        2. env_settings (KDIFF_* env vars)
        3. yaml_settings (layered config.yaml files)
        4. Field defaults, lowest
        """
        return (
            init_settings,
            env_settings,
            sources.YamlLayersSettingsSource(settings_cls, _pathlib.Path.cwd()),
        )

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return top-level fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Collect unknown fields from the whole config, keyed by dotted path.

        Returns e.g. {"output.fromat": "json", "colour": true}.
        """
        result = self.get_extra_fields()
        for section_name in ("engine", "output", "logging"):
            section: types.ConfigBase = getattr(self, section_name)
            result.update(section.collect_all_extra_fields(section_name))
        return result

    @property
    def engine_command(self) -> tuple[str, ...]:
        """Engine command as a tuple (for KustomizeEngine)."""
        return tuple(self.engine.command)
