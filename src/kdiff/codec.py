"""
YAML codec for manifests, resources, and patch documents.

Thin wrapper over PyYAML's safe loader and dumper. Keys keep document
order on output (sort_keys=False). Parse failures raise CodecError so
callers can decide whether they are fatal.

Anchors and aliases are expanded: every loaded node is its own object, so
patching one aliased field never changes another, and dumped documents
never contain anchors.
"""

import typing as _typing

import yaml as _yaml

import kdiff.errors as errors


class _NoAliasDumper(_yaml.SafeDumper):
    """SafeDumper that writes repeated nodes out in full instead of as aliases."""

    def ignore_aliases(self, data: _typing.Any) -> bool:
        return True


def _unshare(node: _typing.Any, parents: tuple[int, ...] = ()) -> _typing.Any:
    """
    Rebuild dicts and lists so no two paths share a container.

    Raises:
        CodecError: If a container contains itself (a recursive alias).
    """
    if not isinstance(node, (dict, list)):
        return node
    if id(node) in parents:
        raise errors.CodecError("invalid YAML: recursive alias")
    parents = (*parents, id(node))
    if isinstance(node, dict):
        return {key: _unshare(value, parents) for key, value in node.items()}
    return [_unshare(item, parents) for item in node]


def load_document(text: str) -> _typing.Any:
    """
    Parse a single YAML document into a tree.

    Returns:
        The parsed tree, or None for an empty document.

    Raises:
        CodecError: If the text is not valid YAML or holds several documents.
    """
    try:
        return _unshare(_yaml.safe_load(text))
    except _yaml.YAMLError as e:
        raise errors.CodecError(f"invalid YAML: {e}") from e


def load_documents(text: str) -> list[_typing.Any]:
    """
    Parse a multi-document YAML stream.

    Empty documents (a bare "---") are dropped.

    Raises:
        CodecError: If the text is not valid YAML.
    """
    try:
        return [_unshare(doc) for doc in _yaml.safe_load_all(text) if doc is not None]
    except _yaml.YAMLError as e:
        raise errors.CodecError(f"invalid YAML: {e}") from e


def dump(tree: _typing.Any) -> str:
    """
    Serialize a tree to YAML text.

    Raises:
        CodecError: If the tree holds values YAML cannot represent.
    """
    try:
        return _yaml.dump(tree, Dumper=_NoAliasDumper, default_flow_style=False, sort_keys=False)
    except _yaml.YAMLError as e:
        raise errors.CodecError(f"cannot serialize: {e}") from e


def dump_all(trees: _typing.Iterable[_typing.Any]) -> str:
    """Serialize several trees as one "---"-separated YAML stream."""
    try:
        return _yaml.dump_all(
            list(trees), Dumper=_NoAliasDumper, default_flow_style=False, sort_keys=False
        )
    except _yaml.YAMLError as e:
        raise errors.CodecError(f"cannot serialize: {e}") from e
