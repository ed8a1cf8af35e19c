"""
The strategic-merge patch dialect.

The patch is a partial document deep-merged into the target:

- dict + dict: merge recursively, patch wins on conflicting leaves
- list + list: concatenate, target elements first
- anything else: the patch value replaces the target value

This is not kustomize's strategic merge (no merge keys, no $patch
directives). Lists are appended to, never matched element by element.

Provenance is reported at the top level only: a merge touching
spec.replicas and spec.template yields one change for "spec".
"""

from __future__ import annotations

import copy as _copy
import typing as _typing

import kdiff.tree._diff as _diff
import kdiff.tree._json_patch as _json_patch
import kdiff.tree._types as _types

OP_MERGE = "merge"


def merge_map(dst: dict[str, _typing.Any], src: dict[str, _typing.Any]) -> None:
    """
    Deep-merge src into dst in place.

    Values taken from src are deep-copied so dst never aliases the patch.
    """
    for key, src_value in src.items():
        if key in dst:
            dst_value = dst[key]
            if _types.is_mapping(src_value) and _types.is_mapping(dst_value):
                merge_map(dst_value, src_value)
                continue
            if _types.is_list(src_value) and _types.is_list(dst_value):
                dst[key] = dst_value + _copy.deepcopy(src_value)
                continue
        dst[key] = _copy.deepcopy(src_value)


def top_level_changes(
    before: dict[str, _typing.Any],
    after: dict[str, _typing.Any],
) -> list[_json_patch.AppliedOperation]:
    """
    Compare two maps key by key at the top level only.

    Keys present after the merge come first, in their order; keys that
    disappeared follow with new_value ABSENT.
    """
    changes: list[_json_patch.AppliedOperation] = []
    for key, new_value in after.items():
        old_value = before.get(key, _types.ABSENT)
        if _types.is_absent(old_value) or not _diff.deep_equal(old_value, new_value):
            changes.append(
                _json_patch.AppliedOperation(
                    op=OP_MERGE,
                    path=(key,),
                    original_value=_copy.deepcopy(old_value),
                    new_value=_copy.deepcopy(new_value),
                )
            )
    for key, old_value in before.items():
        if key not in after:
            changes.append(
                _json_patch.AppliedOperation(
                    op=OP_MERGE,
                    path=(key,),
                    original_value=_copy.deepcopy(old_value),
                    new_value=_types.ABSENT,
                )
            )
    return changes


def apply_merge_patch(
    tree: dict[str, _typing.Any],
    patch: dict[str, _typing.Any],
) -> list[_json_patch.AppliedOperation]:
    """
    Merge patch into tree in place and report top-level changes.

    Returns:
        One change per top-level key whose value differs (by deep
        structural equality) between the pre- and post-merge tree.
    """
    before = _copy.deepcopy(tree)
    merge_map(tree, patch)
    return top_level_changes(before, tree)
