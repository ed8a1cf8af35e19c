"""
Value and label formatting shared by the report renderers.
"""

from __future__ import annotations

import json as _json
import os as _os
import typing as _typing

import kdiff.constants as constants
import kdiff.kustomize as kustomize
import kdiff.tree as tree


def format_value(value: _typing.Any) -> str:
    """
    Format a tree node for a one-line report.

    Strings print as-is; everything else prints as compact JSON so maps,
    lists, booleans and null are unambiguous.
    """
    if tree.is_absent(value):
        return "<absent>"
    if isinstance(value, str):
        return value
    return _json.dumps(value, ensure_ascii=False, default=str)


def source_label(source: str) -> str:
    """Basename of a patch source file, or the inline label."""
    if not source:
        return constants.INLINE_SOURCE_LABEL
    return _os.path.basename(source)


def patch_location(patch: kustomize.Patch) -> str | None:
    """Full path of the file a patch came from, or None for an inline patch."""
    source_file = patch.source_file
    return str(source_file) if source_file is not None else None

