"""
Report rendering for kdiff analyses.

Provides multiple output modes:
- PlainTextRenderer: Simple text output (default, pipe-friendly)
- JSONReportRenderer: Machine-readable JSON output
- RichReportRenderer: Colored output with tables and YAML highlighting
"""

import typing as _typing

import rich.console as _rich_console

from kdiff.report.base import ReportRenderer
from kdiff.report.formatting import format_value, patch_location, source_label
from kdiff.report.json_renderer import JSONReportRenderer
from kdiff.report.plain import PlainTextRenderer
from kdiff.report.rich_renderer import RichReportRenderer

FORMATS = ("text", "rich", "json")


def create_renderer(
    format: str = "text",
    *,
    output: _typing.TextIO | None = None,
    separator: str | None = None,
) -> ReportRenderer:
    """
    Create a renderer for an output format.

    Args:
        format: One of "text", "rich", "json".
        output: Stream for report output (default: sys.stdout).
        separator: Field path separator (default: the renderer's own).

    Raises:
        ValueError: If the format is unknown.
    """
    kwargs: dict[str, _typing.Any] = {}
    if separator is not None:
        kwargs["separator"] = separator
    if format == "text":
        return PlainTextRenderer(output, **kwargs)
    if format == "json":
        return JSONReportRenderer(output, **kwargs)
    if format == "rich":
        console = _rich_console.Console(file=output) if output is not None else None
        return RichReportRenderer(console, **kwargs)
    raise ValueError(f"Unknown output format: {format!r} (expected one of {FORMATS})")


__all__ = [
    "FORMATS",
    "JSONReportRenderer",
    "PlainTextRenderer",
    "ReportRenderer",
    "RichReportRenderer",
    "create_renderer",
    "format_value",
    "patch_location",
    "source_label",
]
