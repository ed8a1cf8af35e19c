"""
Exception hierarchy for kdiff.

Every error raised by kdiff derives from KdiffError. The subclasses listed
under "fatal" abort the whole run; the CLI turns them into an error message
and a non-zero exit. Recoverable conditions (a patch whose target is missing,
a patch file that cannot be read or parsed) are not exceptions at the API
boundary: the tracker logs them and records a skipped PatchOutcome instead.
"""

import pathlib as _pathlib


class KdiffError(Exception):
    """Base class for all kdiff errors."""

    pass


class CodecError(KdiffError):
    """YAML text could not be parsed or a tree could not be serialized."""

    pass


class ManifestError(KdiffError):
    """An overlay manifest could not be read, parsed, or validated."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in kustomization {path}: {message}")


class ResourceLoadError(KdiffError):
    """A reference is neither an overlay directory nor a loadable resource."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Failed to load resource {path}: {message}")


class EngineError(KdiffError):
    """The external overlay-build engine failed."""

    def __init__(self, directory: _pathlib.Path, message: str) -> None:
        self.directory = directory
        super().__init__(f"Kustomize build failed for {directory}: {message}")


class PatchFormatError(KdiffError):
    """A JSON-patch operation entry is structurally corrupt."""

    pass


class TreeSerializationError(KdiffError):
    """A patched resource tree could not be serialized back to YAML."""

    def __init__(self, resource_key: str, message: str) -> None:
        self.resource_key = resource_key
        super().__init__(f"Failed to serialize patched resource {resource_key}: {message}")
