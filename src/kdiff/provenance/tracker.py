"""
Field provenance tracker.

Applies collected patches, in discovery order, to the resources they target
and records every field change in a ChangeLog. Patches are cumulative: each
one is applied to the tree left by the previous patches on the same
resource.

Skip policy (warning logged, processing continues):
- no indexed resource matches the patch target
- the patch file cannot be read
- the patch body is not YAML, or is neither a list (JSON patch) nor a
  mapping (merge patch)

Fatal (exception propagates):
- a malformed JSON-patch operation (PatchFormatError)
- a patched tree that cannot be serialized (TreeSerializationError)
"""

from __future__ import annotations

import copy as _copy
import logging as _logging
import typing as _typing

import kdiff.codec as codec
import kdiff.errors as errors
import kdiff.kustomize as kustomize
import kdiff.provenance.records as records
import kdiff.tree as tree

_logger = _logging.getLogger(__name__)

DIALECT_JSON6902 = "json6902"
DIALECT_MERGE = "merge"


def detect_dialect(content: _typing.Any) -> str | None:
    """Pick the patch dialect from the parsed body shape, or None if neither fits."""
    if isinstance(content, list):
        return DIALECT_JSON6902
    if isinstance(content, dict):
        return DIALECT_MERGE
    return None


def read_patch_body(patch: kustomize.Patch) -> str:
    """
    Return the raw text of a patch.

    Raises:
        OSError: If a file-based patch cannot be read.
    """
    if patch.source_path is not None:
        return patch.source_path.read_text(encoding="utf-8")
    return patch.inline_body


class ProvenanceTracker:
    """
    Applies patches to a ResourceIndex and records field provenance.

    The index is updated in place as patches apply; the change log is
    supplied by the caller (or created) and only ever appended to.

    Example:
        >>> tracker = ProvenanceTracker(resolution.resources)
        >>> outcomes = tracker.apply_all(resolution.patches)
        >>> tracker.changes.group_by_resource()
        {'Deployment/test': [FieldChange(...), ...]}
    """

    def __init__(
        self,
        resources: kustomize.ResourceIndex,
        changes: records.ChangeLog | None = None,
    ) -> None:
        self._resources = resources
        self._changes = changes if changes is not None else records.ChangeLog()

    @property
    def changes(self) -> records.ChangeLog:
        """The change log records are appended to."""
        return self._changes

    @property
    def resources(self) -> kustomize.ResourceIndex:
        """The resource index being patched."""
        return self._resources

    def apply_all(self, patches: _typing.Iterable[kustomize.Patch]) -> list[records.PatchOutcome]:
        """Apply patches strictly in order and return one outcome per patch."""
        return [self.apply(patch, position) for position, patch in enumerate(patches, start=1)]

    def apply(self, patch: kustomize.Patch, position: int = 1) -> records.PatchOutcome:
        """
        Apply one patch to its target resource.

        Returns:
            PatchOutcome describing the records produced, or why the patch
            was skipped.

        Raises:
            PatchFormatError: If a JSON-patch operation is malformed.
            TreeSerializationError: If the patched tree cannot be serialized.
        """
        target = self._resources.find_target(patch.target.kind, patch.target.name)
        if target is None:
            return self._skip(
                patch, position, f"No matching resource found for patch target {patch.target}"
            )

        try:
            body = read_patch_body(patch)
        except OSError as e:
            return self._skip(patch, position, f"Reading patch {patch.source_path} failed: {e}")

        try:
            content = codec.load_document(body)
        except errors.CodecError as e:
            return self._skip(patch, position, f"Failed to parse patch content: {e}")

        dialect = detect_dialect(content)
        if dialect is None:
            return self._skip(
                patch,
                position,
                f"Patch content is neither a JSON patch nor a merge patch "
                f"(got {type(content).__name__})",
            )

        before = _copy.deepcopy(target.tree)
        working = _copy.deepcopy(target.tree)
        if dialect == DIALECT_JSON6902:
            applied = tree.apply_json_patch(working, content)
        else:
            applied = tree.apply_merge_patch(working, content)

        patched = self._round_trip(target.key, working)
        self._resources.replace_tree(target.key, patched)

        changes = tuple(
            records.FieldChange(
                resource=target.key,
                path=operation.path,
                source=patch.source,
                original_value=operation.original_value,
                new_value=operation.new_value,
                op=operation.op,
            )
            for operation in applied
        )
        self._changes.extend(changes)

        detected = tree.count_changes(before, patched)
        _logger.info(
            "Applied %s patch %d to %s: %d records, %d changes detected",
            dialect,
            position,
            target.key,
            len(changes),
            detected,
        )
        return records.PatchOutcome(
            position=position,
            patch=patch,
            target_key=target.key,
            dialect=dialect,
            changes=changes,
            detected=detected,
        )

    def _round_trip(self, key: str, patched: dict[str, _typing.Any]) -> dict[str, _typing.Any]:
        """
        Re-materialize a patched tree through the YAML codec.

        Raises:
            TreeSerializationError: If the tree cannot be serialized or the
                result does not parse back into a mapping.
        """
        try:
            reloaded = codec.load_document(codec.dump(patched))
        except errors.CodecError as e:
            raise errors.TreeSerializationError(key, str(e)) from e
        if not isinstance(reloaded, dict):
            raise errors.TreeSerializationError(
                key, f"patched resource is no longer a mapping ({type(reloaded).__name__})"
            )
        return reloaded

    def _skip(
        self,
        patch: kustomize.Patch,
        position: int,
        reason: str,
    ) -> records.PatchOutcome:
        """Log a recoverable problem and return a skipped outcome."""
        _logger.warning("Skipping patch %d (%s): %s", position, patch.target, reason)
        return records.PatchOutcome(position=position, patch=patch, skip_reason=reason)
