"""
Generic tree patch engine.

Operates on untyped trees (dicts, lists, scalars) as parsed from YAML:

- Path addressing: parse_path, get_at_path, set_at_path
- JSON-patch dialect: apply_json_patch (add / replace / remove)
- Merge dialect: merge_map, apply_merge_patch (top-level provenance)
- Diffing: deep_equal, count_changes

Example:
    >>> import kdiff.tree as tree
    >>> doc = {"spec": {"replicas": 1}}
    >>> tree.apply_json_patch(doc, [{"op": "replace", "path": "/spec/replicas", "value": 3}])
    [AppliedOperation(op='replace', path=('spec', 'replicas'), original_value=1, new_value=3)]
    >>> doc
    {'spec': {'replicas': 3}}
"""

from kdiff.tree._diff import count_changes, deep_equal
from kdiff.tree._json_patch import (
    OP_ADD,
    OP_REMOVE,
    OP_REPLACE,
    AppliedOperation,
    PatchOperation,
    apply_add,
    apply_json_patch,
    apply_remove,
    apply_replace,
    parse_operation,
)
from kdiff.tree._merge import OP_MERGE, apply_merge_patch, merge_map, top_level_changes
from kdiff.tree._paths import (
    APPEND_SEGMENTS,
    format_path,
    get_at_path,
    parse_index,
    parse_path,
    set_at_path,
)
from kdiff.tree._types import ABSENT, FieldPath, Node, is_absent

__all__ = [
    "ABSENT",
    "APPEND_SEGMENTS",
    "OP_ADD",
    "OP_MERGE",
    "OP_REMOVE",
    "OP_REPLACE",
    "AppliedOperation",
    "FieldPath",
    "Node",
    "PatchOperation",
    "apply_add",
    "apply_json_patch",
    "apply_merge_patch",
    "apply_remove",
    "apply_replace",
    "count_changes",
    "deep_equal",
    "format_path",
    "get_at_path",
    "is_absent",
    "merge_map",
    "parse_index",
    "parse_operation",
    "parse_path",
    "set_at_path",
    "top_level_changes",
]
