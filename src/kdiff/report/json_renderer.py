"""
JSON report renderer.

Outputs machine-readable JSON for automation and scripting.
Accumulates all report sections and outputs a single JSON object at the end.
"""

import json as _json
import sys as _sys
import typing as _typing

import kdiff.constants as constants
import kdiff.kustomize as kustomize
import kdiff.provenance as provenance
import kdiff.report.base as base
import kdiff.report.formatting as formatting


class JSONReportRenderer(base.ReportRenderer):
    """
    JSON output renderer.

    Accumulates the report and outputs a single JSON object when finalize()
    is called. Field paths are kept as segment lists; the separator only
    appears in the "field" convenience string.
    """

    def __init__(
        self,
        output: _typing.TextIO | None = None,
        *,
        indent: int = 2,
        separator: str = constants.DEFAULT_PATH_SEPARATOR,
    ) -> None:
        """
        Initialize the JSON renderer.

        Args:
            output: Stream for output (default: sys.stdout).
            indent: JSON indentation level.
            separator: Separator used for the "field" strings.
        """
        super().__init__(separator=separator)
        self._output = output or _sys.stdout
        self._indent = indent

        self._configuration: dict[str, _typing.Any] = {}
        self._patches: list[dict[str, _typing.Any]] = []
        self._outcomes: list[dict[str, _typing.Any]] = []
        self._changes: dict[str, list[dict[str, _typing.Any]]] = {}
        self._warnings: list[str] = []
        self._summary: dict[str, int] = {}
        self._final_output: str | None = None

    def show_configuration(self, manifest: kustomize.Kustomization) -> None:
        """Record the root manifest's resources and components."""
        self._configuration = {
            "resources": list(manifest.resources),
            "components": list(manifest.components),
        }

    def show_patches(self, patches: list[kustomize.Patch]) -> None:
        """Record the collected patches."""
        self._patches = [
            {
                "position": position,
                "file": formatting.patch_location(patch),
                "target": {"kind": patch.target.kind, "name": patch.target.name},
                "section": patch.section,
                "declared_in": str(patch.declared_in) if patch.declared_in is not None else None,
            }
            for position, patch in enumerate(patches, start=1)
        ]

    def start_processing(self, resource_count: int, patch_count: int) -> None:
        """Record resource and patch counts."""
        self._summary = {"resources": resource_count, "patches": patch_count}

    def show_patch_outcome(self, outcome: provenance.PatchOutcome, total: int) -> None:
        """Record one patch outcome."""
        _ = total
        data: dict[str, _typing.Any] = {
            "position": outcome.position,
            "applied": outcome.applied,
            "target": outcome.target_key,
            "dialect": outcome.dialect,
            "records": len(outcome.changes),
            "changes_detected": outcome.detected,
        }
        if outcome.skip_reason is not None:
            data["skip_reason"] = outcome.skip_reason
            self._warnings.append(outcome.skip_reason)
        self._outcomes.append(data)

    def show_changes(self, grouped: dict[str, list[provenance.FieldChange]]) -> None:
        """Record field changes grouped by resource."""
        self._changes = {}
        for resource, changes in grouped.items():
            entries = []
            for change in changes:
                entry = change.to_dict()
                entry["field"] = self.format_path(change.path)
                entry["modified_by"] = formatting.source_label(change.source)
                entries.append(entry)
            self._changes[resource] = entries

    def show_final_output(self, text: str) -> None:
        """Record the final merged output."""
        self._final_output = text

    def show_warning(self, message: str) -> None:
        """Record a warning."""
        self._warnings.append(message)

    def finalize(self) -> None:
        """Output the accumulated report as JSON."""
        result: dict[str, _typing.Any] = {
            "configuration": self._configuration,
            "patches": self._patches,
            "summary": self._summary,
            "outcomes": self._outcomes,
            "changes": self._changes,
            "warnings": self._warnings,
        }
        if self._final_output is not None:
            result["final_output"] = self._final_output

        self._output.write(
            _json.dumps(result, indent=self._indent, ensure_ascii=False, default=str)
        )
        self._output.write("\n")
        self._output.flush()
