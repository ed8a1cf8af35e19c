"""
The add / replace / remove patch dialect.

A patch is an ordered list of operations, each a mapping with "op", "path"
and (for add/replace) "value". Operations are applied in place, in order,
with lenient semantics: a path that cannot be followed is a silent no-op
for that operation rather than an error.

Accepted simplification: replace does not check that its target exists. At
a dict key it behaves exactly like add.
"""

from __future__ import annotations

import copy as _copy
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import kdiff.errors as errors
import kdiff.tree._paths as _paths
import kdiff.tree._types as _types

_logger = _logging.getLogger(__name__)

OP_ADD = "add"
OP_REPLACE = "replace"
OP_REMOVE = "remove"

SUPPORTED_OPS = (OP_ADD, OP_REPLACE, OP_REMOVE)


@_dataclasses.dataclass(frozen=True, slots=True)
class PatchOperation:
    """One validated operation of a JSON-patch document."""

    op: str
    path: _types.FieldPath
    value: _typing.Any = None


@_dataclasses.dataclass(frozen=True, slots=True)
class AppliedOperation:
    """
    Before/after state of one applied operation.

    original_value is what get_at_path returned before the operation ran
    (ABSENT if nothing was there). new_value is the operation's value, or
    ABSENT for remove.
    """

    op: str
    path: _types.FieldPath
    original_value: _typing.Any
    new_value: _typing.Any


def parse_operation(entry: _typing.Any) -> PatchOperation:
    """
    Validate one raw operation entry.

    Raises:
        PatchFormatError: If the entry is not a mapping, or "op" or "path"
            is missing or not a string.
    """
    if not isinstance(entry, dict):
        raise errors.PatchFormatError(
            f"Invalid patch operation format: expected a mapping, got {type(entry).__name__}"
        )
    op = entry.get("op")
    if not isinstance(op, str):
        raise errors.PatchFormatError(f"Missing or invalid operation type in {entry!r}")
    path = entry.get("path")
    if not isinstance(path, str):
        raise errors.PatchFormatError(f"Missing or invalid path in {entry!r}")
    return PatchOperation(op=op, path=_paths.parse_path(path), value=entry.get("value"))


def parse_operations(document: list[_typing.Any]) -> list[PatchOperation]:
    """Validate every entry of a JSON-patch document before anything is applied."""
    return [parse_operation(entry) for entry in document]


def apply_add(tree: _typing.Any, path: _types.FieldPath, value: _typing.Any) -> bool:
    """
    Add value at path.

    On a list the last segment either appends ("-1" or "-") or inserts
    before an index in [0, len]. On a dict the key is set.

    Returns:
        True if the tree was written.
    """
    if not path:
        return False
    parent = _paths.descend_for_write(tree, path[:-1])
    key = path[-1]
    if _types.is_mapping(parent):
        parent[key] = value
        return True
    if _types.is_list(parent):
        if key in _paths.APPEND_SEGMENTS:
            parent.append(value)
            return True
        index = _paths.parse_index(key)
        if index is None or index < 0 or index > len(parent):
            return False
        parent.insert(index, value)
        return True
    return False


def apply_replace(tree: _typing.Any, path: _types.FieldPath, value: _typing.Any) -> bool:
    """Overwrite the node at path. No existence check at a dict key."""
    return _paths.set_at_path(tree, path, value)


def apply_remove(tree: _typing.Any, path: _types.FieldPath) -> bool:
    """
    Remove the node at path if it exists.

    Unlike add and replace, nothing is auto-vivified on the way down.

    Returns:
        True if something was removed.
    """
    if not path:
        return False
    parent = _paths.get_at_path(tree, path[:-1])
    key = path[-1]
    if _types.is_mapping(parent):
        if key not in parent:
            return False
        del parent[key]
        return True
    if _types.is_list(parent):
        index = _paths.list_index(key, len(parent))
        if index is None:
            return False
        del parent[index]
        return True
    return False


def apply_operation(tree: _typing.Any, operation: PatchOperation) -> AppliedOperation | None:
    """
    Apply one operation in place and describe what it did.

    Returns:
        AppliedOperation, or None for an op outside the supported dialect.
    """
    if operation.op not in SUPPORTED_OPS:
        _logger.warning(
            "Skipping unsupported patch operation %r at /%s",
            operation.op,
            "/".join(operation.path),
        )
        return None

    original = _copy.deepcopy(_paths.get_at_path(tree, operation.path))

    if operation.op == OP_REMOVE:
        applied = apply_remove(tree, operation.path)
        new_value: _typing.Any = _types.ABSENT
    else:
        new_value = operation.value
        value = _copy.deepcopy(operation.value)
        if operation.op == OP_ADD:
            applied = apply_add(tree, operation.path, value)
        else:
            applied = apply_replace(tree, operation.path, value)

    if not applied:
        _logger.debug("Operation %s at /%s did not apply", operation.op, "/".join(operation.path))

    return AppliedOperation(
        op=operation.op,
        path=operation.path,
        original_value=original,
        new_value=_copy.deepcopy(new_value),
    )


def apply_json_patch(
    tree: _typing.Any,
    document: list[_typing.Any],
) -> list[AppliedOperation]:
    """
    Apply a JSON-patch document to tree in place.

    Args:
        tree: The resource tree to mutate.
        document: Raw list of operation mappings (as parsed from YAML/JSON).

    Returns:
        One AppliedOperation per supported operation, in document order.
        Operations that did not apply (bad index, missing parent) are still
        reported, with the original value captured before the attempt.

    Raises:
        PatchFormatError: If any entry is malformed.
    """
    results: list[AppliedOperation] = []
    for operation in parse_operations(document):
        applied = apply_operation(tree, operation)
        if applied is not None:
            results.append(applied)
    return results
