"""
Base class for report rendering.

Implements a layered reporting system:
- PlainTextRenderer - Just strings, fully testable
- JSONReportRenderer - Structured output, machine-readable
- RichReportRenderer - Colors, tables and syntax highlighting

All renderers implement the same interface, allowing injection for testing.
render() walks an Analysis and calls the hooks in a fixed order; renderers
only decide how each piece looks.
"""

import abc as _abc

import kdiff.analysis as analysis_module
import kdiff.codec as codec
import kdiff.constants as constants
import kdiff.kustomize as kustomize
import kdiff.provenance as provenance


class ReportRenderer(_abc.ABC):
    """
    Abstract base class for all report renderers.

    Hook order for one report:
    show_configuration, show_patches, start_processing, show_patch_outcome
    (once per patch), show_changes, show_final_output (optional), finalize.
    """

    def __init__(self, *, separator: str = constants.DEFAULT_PATH_SEPARATOR) -> None:
        self._separator = separator

    def format_path(self, path: tuple[str, ...]) -> str:
        """Join field path segments with the configured separator."""
        return self._separator.join(path)

    def render(
        self,
        analysis: analysis_module.Analysis,
        *,
        show_final: bool = False,
    ) -> None:
        """Render a complete report for one analysis."""
        resolution = analysis.resolution
        self.show_configuration(resolution.manifest)
        self.show_patches(resolution.patches)
        for warning in resolution.warnings:
            self.show_warning(warning)
        self.start_processing(len(resolution.resources), len(analysis.outcomes))
        for outcome in analysis.outcomes:
            self.show_patch_outcome(outcome, len(analysis.outcomes))
        self.show_changes(analysis.grouped_changes())
        if show_final:
            self.show_final_output(
                codec.dump_all(resource.tree for resource in analysis.final_resources)
            )
        self.finalize()

    @_abc.abstractmethod
    def show_configuration(self, manifest: kustomize.Kustomization) -> None:
        """Display the root manifest's resources and components."""
        ...

    @_abc.abstractmethod
    def show_patches(self, patches: list[kustomize.Patch]) -> None:
        """Display every collected patch in application order."""
        ...

    @_abc.abstractmethod
    def start_processing(self, resource_count: int, patch_count: int) -> None:
        """Called before the per-patch outcomes are shown."""
        ...

    @_abc.abstractmethod
    def show_patch_outcome(self, outcome: provenance.PatchOutcome, total: int) -> None:
        """Display what happened to one patch."""
        ...

    @_abc.abstractmethod
    def show_changes(self, grouped: dict[str, list[provenance.FieldChange]]) -> None:
        """Display field changes grouped by resource."""
        ...

    @_abc.abstractmethod
    def show_final_output(self, text: str) -> None:
        """Display the engine's final merged output (YAML text)."""
        ...

    @_abc.abstractmethod
    def show_warning(self, message: str) -> None:
        """Display a recoverable problem."""
        ...

    def finalize(self) -> None:  # noqa: B027 - intentionally empty, override if needed
        """Called once the whole report has been shown."""
        pass
