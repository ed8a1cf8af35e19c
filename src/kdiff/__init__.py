"""
kdiff - field provenance for kustomize overlays

Walks an overlay tree, applies every patch the way a build would, and
reports which patch changed which field of which resource.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("kdiff")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from kdiff.analysis import Analysis, analyze  # noqa: E402
from kdiff.config import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "Analysis", "Settings", "analyze"]
