"""
Kustomize overlay handling.

- manifest: kustomization.yaml model and loading
- resources: Resource and ResourceIndex
- engine: external `kustomize build` engine
- resolver: depth-first overlay tree resolver
"""

from kdiff.kustomize.engine import KustomizeEngine, OverlayEngine
from kdiff.kustomize.manifest import (
    Kustomization,
    PatchSpec,
    PatchTargetSpec,
    find_manifest,
    is_overlay,
    load_manifest,
    load_overlay_manifest,
)
from kdiff.kustomize.resolver import (
    SECTION_JSON6902,
    SECTION_PATCHES,
    SECTION_STRATEGIC_MERGE,
    Patch,
    PatchTarget,
    Resolution,
    TreeResolver,
    resolve_reference,
)
from kdiff.kustomize.resources import (
    Resource,
    ResourceIndex,
    identity_key,
    load_resource_file,
)

__all__ = [
    "SECTION_JSON6902",
    "SECTION_PATCHES",
    "SECTION_STRATEGIC_MERGE",
    "Kustomization",
    "KustomizeEngine",
    "OverlayEngine",
    "Patch",
    "PatchSpec",
    "PatchTarget",
    "PatchTargetSpec",
    "Resolution",
    "Resource",
    "ResourceIndex",
    "TreeResolver",
    "find_manifest",
    "identity_key",
    "is_overlay",
    "load_manifest",
    "load_overlay_manifest",
    "load_resource_file",
    "resolve_reference",
]
