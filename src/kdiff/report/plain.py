"""
Plain text report renderer.

Outputs simple text to stdout with no formatting or colors.
Fully testable and works in any terminal or pipe.
"""

import sys as _sys
import typing as _typing

import kdiff.constants as constants
import kdiff.kustomize as kustomize
import kdiff.provenance as provenance
import kdiff.report.base as base
import kdiff.report.formatting as formatting
import kdiff.tree as tree


class PlainTextRenderer(base.ReportRenderer):
    """
    Simple plain text renderer.

    Outputs to stdout (or a custom stream) with no ANSI codes or formatting.
    This is the default renderer, suitable for piped output and testing.
    """

    def __init__(
        self,
        output: _typing.TextIO | None = None,
        *,
        separator: str = constants.DEFAULT_PATH_SEPARATOR,
    ) -> None:
        """
        Initialize the plain text renderer.

        Args:
            output: Stream for report output (default: sys.stdout).
            separator: Separator between field path segments.
        """
        super().__init__(separator=separator)
        self._output = output or _sys.stdout

    def _write(self, text: str = "") -> None:
        self._output.write(text + "\n")

    def show_configuration(self, manifest: kustomize.Kustomization) -> None:
        self._write()
        self._write("=== Kustomization Configuration ===")
        self._write("Base Resources:")
        for resource in manifest.resources:
            self._write(f"  - {resource}")
        if manifest.components:
            self._write("Components:")
            for component in manifest.components:
                self._write(f"  - {component}")

    def show_patches(self, patches: list[kustomize.Patch]) -> None:
        self._write()
        self._write("Patches:")
        for position, patch in enumerate(patches, start=1):
            location = formatting.patch_location(patch)
            if location is not None:
                self._write(f"  {position}. File: {location}")
            else:
                self._write(f"  {position}. Inline Patch")
            self._write(f"     Target: {patch.target}")

    def start_processing(self, resource_count: int, patch_count: int) -> None:
        self._write()
        self._write("=== Processing Patches ===")
        self._write(f"Found {resource_count} base resources")
        self._write(f"Found {patch_count} patches to apply")

    def show_patch_outcome(self, outcome: provenance.PatchOutcome, total: int) -> None:
        self._write()
        self._write(f"--- Processing Patch {outcome.position}/{total} ---")
        location = formatting.patch_location(outcome.patch)
        if location is not None:
            self._write(f"Patch File: {location}")
        else:
            self._write("Inline Patch")
        self._write(f"Target: {outcome.patch.target}")
        if outcome.skip_reason is not None:
            self.show_warning(outcome.skip_reason)
            return
        self._write(f"Changes detected: {outcome.detected}")

    def show_changes(self, grouped: dict[str, list[provenance.FieldChange]]) -> None:
        self._write()
        self._write("=== Field Changes ===")
        for resource, changes in grouped.items():
            self._write()
            self._write(f"Resource: {resource}")
            self._write("Changes:")
            for change in changes:
                self._write(f"  • Field: {self.format_path(change.path)}")
                self._write(f"    Modified by: {formatting.source_label(change.source)}")
                if not tree.is_absent(change.original_value):
                    self._write(f"    Original: {formatting.format_value(change.original_value)}")
                if tree.is_absent(change.new_value):
                    self._write("    Removed")
                else:
                    self._write(f"    New: {formatting.format_value(change.new_value)}")

    def show_final_output(self, text: str) -> None:
        self._write()
        self._write("=== Final Output ===")
        self._write(text)

    def show_warning(self, message: str) -> None:
        self._write(f"Warning: {message}")

    def finalize(self) -> None:
        self._output.flush()
