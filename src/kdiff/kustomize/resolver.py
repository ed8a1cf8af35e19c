"""
Kustomization tree resolver.

Walks an overlay tree depth-first and flattens it into:

- an ordered list of Patches, each with its source file resolved relative
  to the overlay that declared it (patches reference files beside
  themselves, not beside the root)
- a ResourceIndex of base resources, keyed by "Kind/name"

For a nested overlay directory D the order is:

1. D's merge patches, in manifest order (`patches`, then
   `patchesStrategicMerge` files, which name their own target)
2. D's JSON-patch entries (file bodies read eagerly)
3. D's resources, recursively
4. D's components, recursively (same rules as resources)
5. a full engine build of D, merged into the index

Step 5 runs last so per-resource tracking starts from the least-patched
version available, with the engine's output as a backstop for resources
plain file loading cannot see (generators and the like).

The root overlay is handled like the top-level driver of a build: its
resources and components are resolved first, then its own patches are
appended. The root is not self-built into the index; its full build is the
final output.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib

import kdiff.codec as codec
import kdiff.errors as errors
import kdiff.kustomize.engine as engine_module
import kdiff.kustomize.manifest as manifest_module
import kdiff.kustomize.resources as resources

_logger = _logging.getLogger(__name__)

SECTION_PATCHES = "patches"
SECTION_JSON6902 = "patchesJson6902"
SECTION_STRATEGIC_MERGE = "patchesStrategicMerge"


@_dataclasses.dataclass(frozen=True, slots=True)
class PatchTarget:
    """Which resource a patch applies to. An empty name means "first of kind"."""

    kind: str
    name: str = ""

    def __str__(self) -> str:
        return f"{self.kind}/{self.name}"


@_dataclasses.dataclass(frozen=True, slots=True)
class Patch:
    """
    A patch collected from some overlay in the tree.

    Exactly one of source_path / inline_body carries the patch: file-based
    merge patches are read when they are applied, everything else travels
    as text. origin_path records the file an eagerly-read JSON patch came
    from so reports can still name it.
    """

    target: PatchTarget
    source_path: _pathlib.Path | None = None
    inline_body: str = ""
    origin_path: _pathlib.Path | None = None
    section: str = SECTION_PATCHES
    declared_in: _pathlib.Path | None = None
    """Overlay directory whose manifest declared the patch."""

    @property
    def is_inline(self) -> bool:
        """True if the body travels as text rather than a file to read."""
        return self.source_path is None

    @property
    def source_file(self) -> _pathlib.Path | None:
        """The file this patch came from, if any."""
        return self.source_path or self.origin_path

    @property
    def source(self) -> str:
        """Source attribution for change records ("" means inline)."""
        source_file = self.source_file
        return str(source_file) if source_file is not None else ""


@_dataclasses.dataclass
class Resolution:
    """Everything the resolver collected from an overlay tree."""

    root: _pathlib.Path
    manifest: manifest_module.Kustomization
    patches: list[Patch]
    resources: resources.ResourceIndex
    warnings: list[str] = _dataclasses.field(default_factory=list)
    """Recoverable problems met while resolving (unreadable patch files)."""


def resolve_reference(directory: _pathlib.Path, reference: str) -> _pathlib.Path:
    """Resolve a manifest entry relative to the directory that declares it."""
    return _pathlib.Path(_os.path.normpath(directory / reference))


class TreeResolver:
    """
    Depth-first resolver for overlay trees.

    Example:
        >>> resolver = TreeResolver(KustomizeEngine())
        >>> resolution = resolver.resolve(pathlib.Path("overlays/prod"))
        >>> [str(p.target) for p in resolution.patches]
        ['Deployment/web', 'Service/web']
    """

    def __init__(self, engine: engine_module.OverlayEngine) -> None:
        self._engine = engine
        self._patches: list[Patch] = []
        self._resources = resources.ResourceIndex()
        self._stack: list[_pathlib.Path] = []
        self._warnings: list[str] = []

    def resolve(self, root: _pathlib.Path) -> Resolution:
        """
        Resolve an overlay tree from its root directory.

        Raises:
            ManifestError: If any manifest cannot be loaded, or overlays
                reference each other in a cycle.
            ResourceLoadError: If a reference is neither an overlay nor a
                loadable resource file.
            EngineError: If a nested overlay build fails.
        """
        self._patches = []
        self._resources = resources.ResourceIndex()
        self._stack = []
        self._warnings = []

        root = _pathlib.Path(_os.path.normpath(root))
        manifest = manifest_module.load_overlay_manifest(root)
        _logger.debug("Resolving overlay tree at %s", root)

        self._stack.append(root.resolve())
        try:
            self._process_references(root, manifest)
        finally:
            self._stack.pop()
        self._collect_patches(root, manifest)

        _logger.info(
            "Resolved %d patches and %d resources under %s",
            len(self._patches),
            len(self._resources),
            root,
        )
        return Resolution(
            root=root,
            manifest=manifest,
            patches=list(self._patches),
            resources=self._resources,
            warnings=list(self._warnings),
        )

    def _process_references(
        self,
        directory: _pathlib.Path,
        manifest: manifest_module.Kustomization,
    ) -> None:
        """Resolve resources, then components, of one overlay."""
        for entry in manifest.resources:
            self._process_reference(resolve_reference(directory, entry))
        for entry in manifest.components:
            self._process_reference(resolve_reference(directory, entry))

    def _process_reference(self, path: _pathlib.Path) -> None:
        """Recurse into an overlay directory, or load a resource file."""
        if manifest_module.is_overlay(path):
            self._process_overlay(path)
            return

        loaded = resources.load_resource_file(path)
        for resource in loaded:
            _logger.debug("Indexed %s from %s", resource.key, path)
        self._resources.update(loaded)

    def _process_overlay(self, directory: _pathlib.Path) -> None:
        """Process a nested overlay: patches, children, then its own build."""
        identity = directory.resolve()
        if identity in self._stack:
            chain = " -> ".join(str(p) for p in [*self._stack, identity])
            raise errors.ManifestError(directory, f"cycle detected: {chain}")

        manifest = manifest_module.load_overlay_manifest(directory)
        _logger.debug("Entering overlay %s", directory)

        self._stack.append(identity)
        try:
            self._collect_patches(directory, manifest)
            self._process_references(directory, manifest)
        finally:
            self._stack.pop()

        built = self._engine.build(directory)
        _logger.debug("Engine build of %s produced %d resources", directory, len(built))
        self._resources.update(built)

    def _collect_patches(
        self,
        directory: _pathlib.Path,
        manifest: manifest_module.Kustomization,
    ) -> None:
        """Append an overlay's patches, resolving files against its directory."""
        for spec in manifest.patches:
            target = PatchTarget(kind=spec.target.kind, name=spec.target.name)
            if spec.path:
                self._patches.append(
                    Patch(
                        target=target,
                        source_path=resolve_reference(directory, spec.path),
                        declared_in=directory,
                    )
                )
            else:
                self._patches.append(
                    Patch(target=target, inline_body=spec.patch, declared_in=directory)
                )

        for entry in manifest.patches_strategic_merge:
            path = resolve_reference(directory, entry)
            target = self._strategic_merge_target(path)
            if target is not None:
                self._patches.append(
                    Patch(
                        target=target,
                        source_path=path,
                        section=SECTION_STRATEGIC_MERGE,
                        declared_in=directory,
                    )
                )

        for spec in manifest.patches_json6902:
            target = PatchTarget(kind=spec.target.kind, name=spec.target.name)
            if spec.path:
                path = resolve_reference(directory, spec.path)
                try:
                    body = path.read_text(encoding="utf-8")
                except OSError as e:
                    _logger.warning("Reading patch %s failed: %s", path, e)
                    self._warnings.append(f"Reading patch {path} failed: {e}")
                    continue
                self._patches.append(
                    Patch(
                        target=target,
                        inline_body=body,
                        origin_path=path,
                        section=SECTION_JSON6902,
                        declared_in=directory,
                    )
                )
            else:
                self._patches.append(
                    Patch(
                        target=target,
                        inline_body=spec.patch,
                        section=SECTION_JSON6902,
                        declared_in=directory,
                    )
                )

    def _strategic_merge_target(self, path: _pathlib.Path) -> PatchTarget | None:
        """
        Read the target of a patchesStrategicMerge file from its own header.

        An unreadable file, or one without kind and metadata.name, is a
        resolution warning and yields None.
        """
        try:
            content = codec.load_document(path.read_text(encoding="utf-8"))
        except (OSError, errors.CodecError) as e:
            _logger.warning("Reading patch %s failed: %s", path, e)
            self._warnings.append(f"Reading patch {path} failed: {e}")
            return None

        header = content if isinstance(content, dict) else {}
        metadata = header.get("metadata")
        kind = header.get("kind")
        name = metadata.get("name") if isinstance(metadata, dict) else None
        if not kind or not name:
            message = f"Patch {path} does not name its target (kind and metadata.name)"
            _logger.warning("%s", message)
            self._warnings.append(message)
            return None
        return PatchTarget(kind=str(kind), name=str(name))
