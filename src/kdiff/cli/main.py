"""
Main CLI entry point for kdiff.

Provides the command-line interface using Click:

    kdiff [OPTIONS] KUSTOMIZATION_DIR

Builds the overlay with the external engine, traces every patch back to
the fields it changed, and prints the report.
"""

import logging as _logging
import pathlib as _pathlib
import shlex as _shlex
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging

import kdiff
import kdiff.analysis as analysis
import kdiff.config as config
import kdiff.errors as errors
import kdiff.kustomize as kustomize
import kdiff.report as report

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_LOG_LEVELS = {
    "debug": _logging.DEBUG,
    "info": _logging.INFO,
    "warning": _logging.WARNING,
    "error": _logging.ERROR,
}


class _KdiffLogHandler(_rich_logging.RichHandler):
    """RichHandler on stderr, marked so repeated runs replace rather than stack."""

    def __init__(self) -> None:
        super().__init__(
            console=_rich_console.Console(stderr=True),
            show_time=False,
            show_path=False,
        )


def configure_logging(level_name: str, *, verbose: bool = False) -> None:
    """
    Route kdiff's loggers to stderr through rich.

    Args:
        level_name: Configured level (debug, info, warning, error).
        verbose: Raise the level to at least INFO.
    """
    level = _LOG_LEVELS[level_name]
    if verbose:
        level = min(level, _logging.INFO)

    logger = _logging.getLogger("kdiff")
    for handler in list(logger.handlers):
        if isinstance(handler, _KdiffLogHandler):
            logger.removeHandler(handler)
    logger.addHandler(_KdiffLogHandler())
    logger.setLevel(level)


def create_engine(settings: config.Settings) -> kustomize.OverlayEngine:
    """Create the overlay-build engine described by the settings."""
    return kustomize.KustomizeEngine(
        settings.engine_command,
        timeout=settings.engine.timeout_seconds,
    )


def _load_settings(
    *,
    output_format: str | None,
    show_final: bool | None,
    engine_command: str | None,
) -> config.Settings:
    """Load settings, with command-line options taking precedence."""
    overrides: dict[str, _typing.Any] = {}
    output_overrides: dict[str, _typing.Any] = {}
    if output_format is not None:
        output_overrides["format"] = output_format
    if show_final is not None:
        output_overrides["show_final"] = show_final
    if output_overrides:
        overrides["output"] = output_overrides
    if engine_command is not None:
        overrides["engine"] = {"command": _shlex.split(engine_command)}
    return config.Settings(**overrides)


def _warn_unknown_keys(settings: config.Settings) -> None:
    """Report config keys that no section recognizes (usually typos)."""
    for key in sorted(settings.collect_all_extra_fields()):
        _click.echo(f"Warning: unknown config key '{key}' (ignored)", err=True)


@_click.command(context_settings=CONTEXT_SETTINGS)
@_click.version_option(kdiff.__version__, "-v", "--version", prog_name="kdiff")
@_click.argument(
    "kustomization_dir",
    type=_click.Path(exists=True, file_okay=False, dir_okay=True, path_type=_pathlib.Path),
)
@_click.option(
    "--show-final/--no-show-final",
    default=None,
    help="Also print the final merged output of the build.",
)
@_click.option(
    "--format",
    "output_format",
    type=_click.Choice(report.FORMATS),
    default=None,
    help="Report format (default: from config, else text).",
)
@_click.option(
    "--engine-command",
    default=None,
    metavar="COMMAND",
    help='Overlay build command, e.g. "kubectl kustomize" (directory is appended).',
)
@_click.option(
    "-V",
    "--verbose",
    is_flag=True,
    help="Log progress (INFO level) to stderr.",
)
def cli(
    kustomization_dir: _pathlib.Path,
    show_final: bool | None,
    output_format: str | None,
    engine_command: str | None,
    verbose: bool,
) -> None:
    """
    Show which patch changed which field of a kustomize overlay.

    KUSTOMIZATION_DIR is the root overlay directory (it must contain a
    kustomization.yaml).
    """
    try:
        settings = _load_settings(
            output_format=output_format,
            show_final=show_final,
            engine_command=engine_command,
        )
    except errors.KdiffError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
    except _pydantic.ValidationError as e:
        _click.echo(f"Error: invalid configuration:\n{e}", err=True)
        raise SystemExit(1) from None

    configure_logging(settings.logging.level, verbose=verbose)
    _warn_unknown_keys(settings)

    renderer = report.create_renderer(
        settings.output.format,
        separator=settings.output.separator,
    )

    try:
        result = analysis.analyze(kustomization_dir, create_engine(settings))
        renderer.render(result, show_final=settings.output.show_final)
    except errors.KdiffError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
