"""
Field change records and the change log.

A FieldChange says that one patch changed one field of one resource from
one value to another. Records are immutable; the ChangeLog only appends.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import kdiff.kustomize as kustomize
import kdiff.tree as tree

CHANGE_ADDITION = "addition"
CHANGE_REPLACEMENT = "replacement"
CHANGE_REMOVAL = "removal"
CHANGE_UNCHANGED = "unchanged"


@_dataclasses.dataclass(frozen=True, slots=True)
class FieldChange:
    """
    One field-level provenance record.

    original_value / new_value are tree nodes, or tree.ABSENT where the
    field did not exist before / does not exist after.
    """

    resource: str
    """Identity key of the patched resource ("Kind/name")."""

    path: tree.FieldPath
    source: str
    """Patch file that caused the change; "" for an inline patch."""

    original_value: _typing.Any = tree.ABSENT
    new_value: _typing.Any = tree.ABSENT
    op: str = ""
    """Operation that produced the record (add, replace, remove, merge)."""

    @property
    def is_inline(self) -> bool:
        """True if the change came from an inline patch."""
        return self.source == ""

    @property
    def change_type(self) -> str:
        """Classify the record: addition, replacement, removal, or unchanged."""
        if tree.is_absent(self.new_value):
            return CHANGE_REMOVAL
        if tree.is_absent(self.original_value):
            return CHANGE_ADDITION
        if tree.deep_equal(self.original_value, self.new_value):
            return CHANGE_UNCHANGED
        return CHANGE_REPLACEMENT

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to a JSON-friendly dict. ABSENT values are omitted."""
        data: dict[str, _typing.Any] = {
            "resource": self.resource,
            "path": list(self.path),
            "source": self.source,
            "op": self.op,
            "change": self.change_type,
        }
        if not tree.is_absent(self.original_value):
            data["original"] = self.original_value
        if not tree.is_absent(self.new_value):
            data["new"] = self.new_value
        return data


@_dataclasses.dataclass(frozen=True, slots=True)
class PatchOutcome:
    """
    What happened to one patch during tracking.

    A skipped patch has skip_reason set and no changes.
    """

    position: int
    """1-based position of the patch in resolver discovery order."""

    patch: kustomize.Patch
    target_key: str | None = None
    dialect: str | None = None
    """Patch dialect (json6902 or merge) once the body was parsed."""

    changes: tuple[FieldChange, ...] = ()
    detected: int = 0
    """Number of leaf differences between the pre- and post-patch tree."""

    skip_reason: str | None = None

    @property
    def applied(self) -> bool:
        """True if the patch was applied to a resource."""
        return self.skip_reason is None


class ChangeLog:
    """
    Append-only, ordered log of FieldChange records.

    Owned by whoever drives tracking; nothing about it is process-global.
    """

    def __init__(self, records: _typing.Iterable[FieldChange] = ()) -> None:
        self._records: list[FieldChange] = list(records)

    def __iter__(self) -> _typing.Iterator[FieldChange]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ChangeLog({len(self._records)} records)"

    @property
    def records(self) -> tuple[FieldChange, ...]:
        """All records, in the order they were appended."""
        return tuple(self._records)

    def append(self, record: FieldChange) -> None:
        """Append one record."""
        self._records.append(record)

    def extend(self, records: _typing.Iterable[FieldChange]) -> None:
        """Append several records in order."""
        self._records.extend(records)

    def group_by_resource(self) -> dict[str, list[FieldChange]]:
        """
        Group records by resource key.

        Groups appear in the order their resource key is first seen in the
        log; records keep log order within a group.
        """
        groups: dict[str, list[FieldChange]] = {}
        for record in self._records:
            groups.setdefault(record.resource, []).append(record)
        return groups
