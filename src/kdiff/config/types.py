"""Configuration type definitions for kdiff settings.

These are the config sections nested in the main Settings class:

- EngineConfig: how the external overlay-build engine is invoked
- OutputConfig: report format and final-output display
- LoggingConfig: log level

All types use `extra="allow"` so unknown keys are preserved rather than
silently dropped; the CLI warns about them so typos surface.
"""

import typing as _typing

import pydantic as _pydantic

import kdiff.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are kept in model_extra so they can be reported.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"engine.comand": ["kubectl", "kustomize"]}

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Engine Settings
# =============================================================================


class EngineConfig(ConfigBase):
    """
    External overlay-build engine settings.

    YAML section: engine.*
    """

    command: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_ENGINE_COMMAND),
        min_length=1,
    )
    """Build command; the overlay directory is appended."""

    timeout_seconds: float | None = _pydantic.Field(
        default=constants.DEFAULT_ENGINE_TIMEOUT_SECONDS,
        gt=0,
    )
    """Seconds before one build is abandoned. None disables the limit."""

    @_pydantic.field_validator("command", mode="before")
    @classmethod
    def _split_command_string(cls, value: _typing.Any) -> _typing.Any:
        """Allow `command: "kubectl kustomize"` as well as a list."""
        if isinstance(value, str):
            return value.split()
        return value


# =============================================================================
# Output Settings
# =============================================================================


class OutputConfig(ConfigBase):
    """
    Report output settings.

    YAML section: output.*
    """

    format: _typing.Literal["text", "rich", "json"] = "text"
    """Report renderer."""

    show_final: bool = False
    """Also print the engine's final merged output."""

    separator: str = constants.DEFAULT_PATH_SEPARATOR
    """Separator between field path segments."""


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Log level for kdiff's own loggers."""
