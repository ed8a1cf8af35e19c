"""
Resources and the resource index.

A Resource is one parsed document with its identity (kind and
metadata.name) and its current tree. The ResourceIndex maps identity keys
("Kind/name") to resources in first-insertion order; adding a resource
whose key already exists overwrites it in place.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import pathlib as _pathlib
import typing as _typing

import kdiff.codec as codec
import kdiff.errors as errors


def identity_key(kind: str, name: str) -> str:
    """Build the index key for a resource."""
    return f"{kind}/{name}"


@_dataclasses.dataclass
class Resource:
    """A resource document and where it was loaded from."""

    kind: str
    name: str
    tree: dict[str, _typing.Any]
    origin: _pathlib.Path | None = None
    """File or overlay directory the resource came from."""

    @property
    def key(self) -> str:
        """Identity key, "Kind/name"."""
        return identity_key(self.kind, self.name)

    @classmethod
    def from_tree(cls, tree: _typing.Any, origin: _pathlib.Path) -> Resource:
        """
        Build a Resource from a parsed document.

        Raises:
            ResourceLoadError: If the document is not a mapping or lacks a
                non-empty kind or metadata.name.
        """
        if not isinstance(tree, dict):
            raise errors.ResourceLoadError(
                origin, f"resource must be a YAML mapping, got {type(tree).__name__}"
            )
        kind = tree.get("kind")
        metadata = tree.get("metadata")
        name = metadata.get("name") if isinstance(metadata, dict) else None
        if not isinstance(kind, str) or not kind:
            raise errors.ResourceLoadError(origin, "missing kind")
        if not isinstance(name, str) or not name:
            raise errors.ResourceLoadError(origin, f"missing metadata.name for kind {kind}")
        return cls(kind=kind, name=name, tree=tree, origin=origin)


def load_resource_file(path: _pathlib.Path) -> list[Resource]:
    """
    Load every resource document in a file.

    Raises:
        ResourceLoadError: If the path cannot be read as a file, is not
            valid YAML, holds no documents, or any document lacks an identity.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise errors.ResourceLoadError(
            path, f"neither a kustomization directory nor a resource file: {e}"
        ) from e

    try:
        documents = codec.load_documents(content)
    except errors.CodecError as e:
        raise errors.ResourceLoadError(path, str(e)) from e

    if not documents:
        raise errors.ResourceLoadError(path, "file contains no resource documents")

    return [Resource.from_tree(document, path) for document in documents]


class ResourceIndex(_abc.Mapping[str, Resource]):
    """
    Ordered index of resources by identity key.

    Last write wins: adding an existing key replaces its resource but keeps
    the key's original position.

    Example:
        >>> index = ResourceIndex()
        >>> index.add(Resource("Deployment", "web", {...}))
        >>> index.find_target("Deployment", "")  # first Deployment
        Resource(kind='Deployment', name='web', ...)
    """

    def __init__(self, resources: _abc.Iterable[Resource] = ()) -> None:
        self._resources: dict[str, Resource] = {}
        for resource in resources:
            self.add(resource)

    def __getitem__(self, key: str) -> Resource:
        return self._resources[key]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"ResourceIndex({list(self._resources)!r})"

    def add(self, resource: Resource) -> None:
        """Insert or overwrite a resource under its identity key."""
        self._resources[resource.key] = resource

    def update(self, resources: _abc.Iterable[Resource]) -> None:
        """Add several resources in order."""
        for resource in resources:
            self.add(resource)

    def replace_tree(self, key: str, tree: dict[str, _typing.Any]) -> None:
        """
        Swap the tree of an indexed resource.

        The identity key is not recomputed, so a patch that renames a
        resource keeps it reachable under its original key.

        Raises:
            KeyError: If key is not indexed.
        """
        self._resources[key].tree = tree

    def find_target(self, kind: str, name: str) -> Resource | None:
        """
        Resolve a patch target selector.

        With a name, the exact "kind/name" key. Without one, the first
        indexed resource of that kind.
        """
        if name:
            return self._resources.get(identity_key(kind, name))
        prefix = f"{kind}/"
        for key, resource in self._resources.items():
            if key.startswith(prefix):
                return resource
        return None
