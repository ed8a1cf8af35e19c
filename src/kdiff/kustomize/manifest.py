"""
Overlay manifest parsing.

An overlay is a directory holding a kustomization.yaml (or one of the other
names kustomize accepts). Only the fields kdiff walks are modeled; every
other kustomize field is preserved in model_extra and otherwise ignored.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

import kdiff.codec as codec
import kdiff.constants as constants
import kdiff.errors as errors


def _none_to_list(value: _typing.Any) -> _typing.Any:
    """A key written with no value (`resources:`) parses as None."""
    return [] if value is None else value


class PatchTargetSpec(_pydantic.BaseModel):
    """
    Patch target selector.

    Only kind and name take part in matching. group, version, namespace and
    selectors are kept as extra fields.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    kind: str = ""
    name: str = ""

    @_pydantic.field_validator("kind", "name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: _typing.Any) -> _typing.Any:
        return "" if value is None else value


class PatchSpec(_pydantic.BaseModel):
    """
    One entry of `patches` or `patchesJson6902`.

    Either `path` names a patch file beside the manifest, or `patch` holds the
    patch body inline.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    path: str = ""
    patch: str = ""
    target: PatchTargetSpec = _pydantic.Field(default_factory=PatchTargetSpec)

    @_pydantic.field_validator("path", mode="before")
    @classmethod
    def _path_none_to_empty(cls, value: _typing.Any) -> _typing.Any:
        return "" if value is None else value

    @_pydantic.field_validator("patch", mode="before")
    @classmethod
    def _inline_body_to_text(cls, value: _typing.Any) -> _typing.Any:
        """Accept a structured inline body by serializing it back to YAML."""
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return codec.dump(value)
        return value

    @_pydantic.field_validator("target", mode="before")
    @classmethod
    def _target_none_to_empty(cls, value: _typing.Any) -> _typing.Any:
        return {} if value is None else value


class Kustomization(_pydantic.BaseModel):
    """
    Overlay manifest parsed from kustomization.yaml.

    `kind: Component` manifests use the same model; components are resolved
    exactly like resources.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    kind: str = "Kustomization"

    resources: list[str] = _pydantic.Field(default_factory=list)
    """Overlay references: resource files or nested overlay directories."""

    components: list[str] = _pydantic.Field(default_factory=list)
    """Component overlay directories."""

    patches: list[PatchSpec] = _pydantic.Field(default_factory=list)
    """Merge (or JSON) patches, from files or inline."""

    patches_json6902: list[PatchSpec] = _pydantic.Field(
        default_factory=list,
        alias="patchesJson6902",
    )
    """JSON-patch-dialect patches."""

    patches_strategic_merge: list[str] = _pydantic.Field(
        default_factory=list,
        alias="patchesStrategicMerge",
    )
    """Merge patch files; each names its own target by kind and metadata.name."""

    @_pydantic.field_validator(
        "resources",
        "components",
        "patches",
        "patches_json6902",
        "patches_strategic_merge",
        mode="before",
    )
    @classmethod
    def _normalize_lists(cls, value: _typing.Any) -> _typing.Any:
        return _none_to_list(value)


def find_manifest(directory: _pathlib.Path) -> _pathlib.Path | None:
    """
    Return the manifest file of an overlay directory, or None.

    Probes constants.MANIFEST_FILENAMES in order.
    """
    for name in constants.MANIFEST_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def is_overlay(path: _pathlib.Path) -> bool:
    """Whether path is a directory holding an overlay manifest."""
    return path.is_dir() and find_manifest(path) is not None


def load_manifest(path: _pathlib.Path) -> Kustomization:
    """
    Load an overlay manifest file.

    Args:
        path: Path to the manifest file itself.

    Returns:
        Parsed Kustomization. An empty file yields an empty manifest.

    Raises:
        ManifestError: If the file cannot be read, is not valid YAML, is not
            a mapping, or does not match the schema.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise errors.ManifestError(path, f"cannot read file: {e}") from e

    try:
        data = codec.load_document(content)
    except errors.CodecError as e:
        raise errors.ManifestError(path, str(e)) from e

    if data is None:
        return Kustomization()
    if not isinstance(data, dict):
        raise errors.ManifestError(
            path, f"manifest must be a YAML mapping, got {type(data).__name__}"
        )

    try:
        return Kustomization.model_validate(data)
    except _pydantic.ValidationError as e:
        raise errors.ManifestError(path, f"invalid manifest: {e}") from e


def load_overlay_manifest(directory: _pathlib.Path) -> Kustomization:
    """
    Load the manifest of an overlay directory.

    Raises:
        ManifestError: If the directory has no manifest or it cannot be loaded.
    """
    path = find_manifest(directory)
    if path is None:
        raise errors.ManifestError(
            directory / constants.MANIFEST_FILENAMES[0],
            "no kustomization file found",
        )
    return load_manifest(path)
