"""
Rich console report renderer.

Outputs formatted text with colors, tables, panels, and YAML syntax
highlighting using the Rich library.
"""

import rich.console as _rich_console
import rich.markup as _rich_markup
import rich.panel as _rich_panel
import rich.rule as _rich_rule
import rich.syntax as _rich_syntax
import rich.table as _rich_table
import rich.tree as _rich_tree

import kdiff.constants as constants
import kdiff.kustomize as kustomize
import kdiff.provenance as provenance
import kdiff.report.base as base
import kdiff.report.formatting as formatting
import kdiff.tree as tree


class RichReportRenderer(base.ReportRenderer):
    """
    Rich console renderer with colors and formatting.

    Uses the Rich library for terminal output including:
    - Tables for the patch list and per-resource changes
    - Colored warnings
    - Syntax-highlighted final YAML output
    """

    def __init__(
        self,
        console: _rich_console.Console | None = None,
        *,
        force_terminal: bool | None = None,
        no_color: bool = False,
        separator: str = constants.DEFAULT_PATH_SEPARATOR,
    ) -> None:
        """
        Initialize the Rich renderer.

        Args:
            console: Rich Console instance (created if not provided).
            force_terminal: Force terminal mode even if not detected.
            no_color: Disable all colors.
            separator: Separator between field path segments.
        """
        super().__init__(separator=separator)
        self._console = console or _rich_console.Console(
            force_terminal=force_terminal,
            no_color=no_color,
        )

    def show_configuration(self, manifest: kustomize.Kustomization) -> None:
        """Display the root manifest as a tree."""
        root = _rich_tree.Tree("[bold]Kustomization Configuration[/bold]")
        resources = root.add("[cyan]Base Resources[/cyan]")
        for resource in manifest.resources:
            resources.add(_rich_markup.escape(resource))
        if manifest.components:
            components = root.add("[cyan]Components[/cyan]")
            for component in manifest.components:
                components.add(_rich_markup.escape(component))
        self._console.print(root)

    def show_patches(self, patches: list[kustomize.Patch]) -> None:
        """Display collected patches as a table."""
        table = _rich_table.Table(title="Patches", title_justify="left")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Source")
        table.add_column("Target", style="cyan")
        for position, patch in enumerate(patches, start=1):
            location = formatting.patch_location(patch)
            table.add_row(
                str(position),
                _rich_markup.escape(location) if location else "[dim]inline[/dim]",
                _rich_markup.escape(str(patch.target)),
            )
        self._console.print(table)

    def start_processing(self, resource_count: int, patch_count: int) -> None:
        """Display the processing header."""
        self._console.print(_rich_rule.Rule("[bold]Processing Patches[/bold]"))
        self._console.print(
            f"[dim]Found {resource_count} base resources, {patch_count} patches to apply[/dim]"
        )

    def show_patch_outcome(self, outcome: provenance.PatchOutcome, total: int) -> None:
        """Display one patch outcome on a single line."""
        prefix = f"[dim]{outcome.position}/{total}[/dim] {_rich_markup.escape(str(outcome.patch.target))}"
        if outcome.skip_reason is not None:
            self._console.print(f"{prefix} [yellow]skipped[/yellow]")
            self.show_warning(outcome.skip_reason)
            return
        self._console.print(
            f"{prefix} [green]{outcome.dialect}[/green] "
            f"changes detected: [bold]{outcome.detected}[/bold]"
        )

    def show_changes(self, grouped: dict[str, list[provenance.FieldChange]]) -> None:
        """Display one table of field changes per resource."""
        self._console.print(_rich_rule.Rule("[bold]Field Changes[/bold]"))
        if not grouped:
            self._console.print("[dim]No field changes[/dim]")
            return
        for resource, changes in grouped.items():
            table = _rich_table.Table(
                title=f"[bold]{_rich_markup.escape(resource)}[/bold]",
                title_justify="left",
            )
            table.add_column("Field", style="cyan")
            table.add_column("Modified by")
            table.add_column("Original", style="red")
            table.add_column("New", style="green")
            for change in changes:
                original = (
                    ""
                    if tree.is_absent(change.original_value)
                    else _rich_markup.escape(formatting.format_value(change.original_value))
                )
                new = (
                    "[bold red]Removed[/bold red]"
                    if tree.is_absent(change.new_value)
                    else _rich_markup.escape(formatting.format_value(change.new_value))
                )
                table.add_row(
                    _rich_markup.escape(self.format_path(change.path)),
                    _rich_markup.escape(formatting.source_label(change.source)),
                    original,
                    new,
                )
            self._console.print(table)

    def show_final_output(self, text: str) -> None:
        """Display the final merged output with YAML highlighting."""
        self._console.print(
            _rich_panel.Panel(
                _rich_syntax.Syntax(text, "yaml", theme="monokai", word_wrap=True),
                title="[bold]Final Output[/bold]",
                border_style="blue",
            )
        )

    def show_warning(self, message: str) -> None:
        """Display a warning in yellow."""
        self._console.print(f"[yellow]Warning:[/yellow] {_rich_markup.escape(message)}")
