"""
Structural equality and change counting for trees.
"""

from __future__ import annotations

import typing as _typing

import deepdiff as _deepdiff

import kdiff.tree._types as _types


def deep_equal(left: _typing.Any, right: _typing.Any) -> bool:
    """
    Deep structural equality.

    Stricter than ==: bools never equal numbers (True != 1), and dict key
    order is ignored while list order is not.
    """
    if _types.is_mapping(left) or _types.is_mapping(right):
        if not (_types.is_mapping(left) and _types.is_mapping(right)):
            return False
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)
    if _types.is_list(left) or _types.is_list(right):
        if not (_types.is_list(left) and _types.is_list(right)):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return bool(left == right)


def count_changes(before: _typing.Any, after: _typing.Any) -> int:
    """
    Count the leaf-level changes between two trees.

    Every changed value, added or removed key, and added or removed list
    element counts once; a subtree that appears or disappears as a whole
    is one change. List order matters.

    Example:
        >>> count_changes({"spec": {"replicas": 1}}, {"spec": {"replicas": 3}})
        1
    """
    diff = _deepdiff.DeepDiff(before, after, view="tree")
    return sum(len(levels) for levels in diff.values())
