"""
Field path addressing over untyped trees.

Paths are tuples of string segments. A segment addressing a dict is a
literal key; a segment addressing a list is a base-10 index. Lookups never
raise: anything that cannot be followed yields ABSENT. Writes are
best-effort: a path that cannot be followed is a silent no-op.
"""

from __future__ import annotations

import re as _re
import typing as _typing

import kdiff.tree._types as _types

# JSON-Pointer append tokens. "-1" is the kustomize-era spelling, "-" the RFC one.
APPEND_SEGMENTS = frozenset({"-1", "-"})

_INDEX_PATTERN = _re.compile(r"-?[0-9]+")


def parse_path(text: str) -> _types.FieldPath:
    """
    Parse a JSON-patch path string into a FieldPath.

    One leading slash is stripped and the rest split on "/". JSON-Pointer
    escapes are decoded per segment ("~1" is "/", "~0" is "~").

    Example:
        >>> parse_path("/spec/template/spec/containers/0/image")
        ('spec', 'template', 'spec', 'containers', '0', 'image')
        >>> parse_path("/metadata/annotations/app.kubernetes.io~1name")
        ('metadata', 'annotations', 'app.kubernetes.io/name')
    """
    if text == "":
        return ()
    if text.startswith("/"):
        text = text[1:]
    return tuple(
        segment.replace("~1", "/").replace("~0", "~") for segment in text.split("/")
    )


def format_path(path: _types.FieldPath, separator: str = " → ") -> str:
    """Join path segments for display."""
    return separator.join(path)


def parse_index(segment: str) -> int | None:
    """Parse a list segment as a base-10 integer, or None if it is not one."""
    if not _INDEX_PATTERN.fullmatch(segment):
        return None
    return int(segment)


def list_index(segment: str, length: int) -> int | None:
    """Return the in-range index a segment addresses in a list of `length`, else None."""
    index = parse_index(segment)
    if index is None or index < 0 or index >= length:
        return None
    return index


def get_at_path(tree: _typing.Any, path: _types.FieldPath) -> _typing.Any:
    """
    Return the node at path, or ABSENT.

    ABSENT is returned when a dict key is missing, a list index is not an
    integer or is out of range, or a scalar sits where a container was
    expected. The empty path addresses the tree itself.
    """
    current = tree
    for segment in path:
        if _types.is_mapping(current):
            if segment not in current:
                return _types.ABSENT
            current = current[segment]
        elif _types.is_list(current):
            index = list_index(segment, len(current))
            if index is None:
                return _types.ABSENT
            current = current[index]
        else:
            return _types.ABSENT
    return current


def descend_for_write(tree: _typing.Any, parents: _types.FieldPath) -> _typing.Any:
    """
    Walk to the container that holds the last segment of a path.

    Missing dict keys along the way are created as empty dicts. List
    segments must index an existing element. Returns ABSENT when the walk
    cannot continue (bad list index, or a scalar in the way).
    """
    current = tree
    for segment in parents:
        if _types.is_mapping(current):
            if segment not in current:
                current[segment] = {}
            current = current[segment]
        elif _types.is_list(current):
            index = list_index(segment, len(current))
            if index is None:
                return _types.ABSENT
            current = current[index]
        else:
            return _types.ABSENT
    return current


def set_at_path(tree: _typing.Any, path: _types.FieldPath, value: _typing.Any) -> bool:
    """
    Set the node at path, overwriting whatever is there.

    Intermediate dict keys are auto-vivified; list elements are not. On a
    list the final segment must be an in-range index.

    Returns:
        True if the tree was written, False if the path did not apply.
    """
    if not path:
        return False
    parent = descend_for_write(tree, path[:-1])
    key = path[-1]
    if _types.is_mapping(parent):
        parent[key] = value
        return True
    if _types.is_list(parent):
        index = list_index(key, len(parent))
        if index is None:
            return False
        parent[index] = value
        return True
    return False
