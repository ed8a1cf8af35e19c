"""
Field provenance tracking: which patch changed which field.
"""

from kdiff.provenance.records import (
    CHANGE_ADDITION,
    CHANGE_REMOVAL,
    CHANGE_REPLACEMENT,
    CHANGE_UNCHANGED,
    ChangeLog,
    FieldChange,
    PatchOutcome,
)
from kdiff.provenance.tracker import (
    DIALECT_JSON6902,
    DIALECT_MERGE,
    ProvenanceTracker,
    detect_dialect,
    read_patch_body,
)

__all__ = [
    "CHANGE_ADDITION",
    "CHANGE_REMOVAL",
    "CHANGE_REPLACEMENT",
    "CHANGE_UNCHANGED",
    "DIALECT_JSON6902",
    "DIALECT_MERGE",
    "ChangeLog",
    "FieldChange",
    "PatchOutcome",
    "ProvenanceTracker",
    "detect_dialect",
    "read_patch_body",
]
