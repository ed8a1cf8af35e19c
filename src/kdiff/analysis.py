"""
Top-level orchestration of one kdiff run.

analyze() builds the final output with the engine, resolves the overlay
tree, applies every patch with a ProvenanceTracker, and returns everything
the reporting layer needs in one Analysis value. The change log is created
here and handed to the tracker, so nothing is shared between runs.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib

import kdiff.kustomize as kustomize
import kdiff.provenance as provenance

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class Analysis:
    """Result of analyzing one overlay tree."""

    root: _pathlib.Path
    resolution: kustomize.Resolution
    outcomes: list[provenance.PatchOutcome]
    changes: provenance.ChangeLog
    final_resources: list[kustomize.Resource]
    """Engine build of the root overlay (the fully merged output)."""

    @property
    def skipped(self) -> list[provenance.PatchOutcome]:
        """Outcomes of patches that were not applied."""
        return [outcome for outcome in self.outcomes if not outcome.applied]

    @property
    def warnings(self) -> list[str]:
        """Every recoverable problem met during the run, in order."""
        messages = list(self.resolution.warnings)
        messages.extend(
            outcome.skip_reason for outcome in self.skipped if outcome.skip_reason is not None
        )
        return messages

    def grouped_changes(self) -> dict[str, list[provenance.FieldChange]]:
        """Field changes grouped by resource, in first-seen order."""
        return self.changes.group_by_resource()


def analyze(
    root: _pathlib.Path,
    engine: kustomize.OverlayEngine,
) -> Analysis:
    """
    Analyze an overlay tree.

    Args:
        root: Root overlay directory.
        engine: Engine used for the final build and nested overlay builds.

    Returns:
        Analysis with the resolution, per-patch outcomes, and change log.

    Raises:
        KdiffError: Any fatal error (engine failure at the root, unloadable
            manifest or resource, malformed patch operation, ...).
    """
    final_resources = engine.build(root)
    _logger.debug("Final build of %s produced %d resources", root, len(final_resources))

    resolution = kustomize.TreeResolver(engine).resolve(root)

    changes = provenance.ChangeLog()
    tracker = provenance.ProvenanceTracker(resolution.resources, changes)
    outcomes = tracker.apply_all(resolution.patches)

    return Analysis(
        root=resolution.root,
        resolution=resolution,
        outcomes=outcomes,
        changes=changes,
        final_resources=final_resources,
    )
