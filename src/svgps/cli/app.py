"""CLI application entry point for svgps.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from svgps import __version__
from svgps.cli.output import (
    console,
    print_document_info,
    print_error,
    print_generate_success,
    print_header,
    print_options,
    print_render_success,
    print_step,
)
from svgps.config import (
    AutocutConfig,
    FlattenConfig,
    LoggingConfig,
    PolishConfig,
    ReaderConfig,
    RenderConfig,
    StrokeSelection,
    SvgpsSettings,
)
from svgps.core import DocumentProcessor
from svgps.exceptions import DocumentLoadError, DocumentSaveError, FormatError, SvgpsError
from svgps.io import SvgReader, write_svgcom
from svgps.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="svgps",
    help="Convert SVG drawings to plotter-friendly canonical paths and back.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]svgps[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert SVG drawings to plotter-friendly canonical paths and back."""


@app.command()
def generate(
    input_svg: Annotated[
        Path,
        typer.Argument(help="Path to input SVG file", show_default=False),
    ],
    output: Annotated[
        Path,
        typer.Argument(help="Path to output .svgcom file", show_default=False),
    ],
    autocut: Annotated[
        bool,
        typer.Option("--autocut", help="Remove stroke parts hidden by fills drawn above them"),
    ] = False,
    polish: Annotated[
        bool,
        typer.Option("--polish", help="Drop insignificant sub-paths"),
    ] = False,
    min_length: Annotated[
        float | None,
        typer.Option(
            "--min-length",
            help="Minimum sub-path length for --polish (default: 0.1% of the diagonal)",
            min=0.0,
        ),
    ] = None,
    tolerance: Annotated[
        float,
        typer.Option("--tolerance", "-t", help="Curve approximation tolerance", min=0.0),
    ] = 0.01,
    workers: Annotated[
        int,
        typer.Option("--workers", "-j", help="Worker processes for --autocut", min=1),
    ] = 1,
    stroked_only: Annotated[
        bool,
        typer.Option("--stroked-only", help="Only emit shapes that have a stroke"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose console output"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Convert an SVG file into the canonical path format.

    Every shape is reduced to Move, Line, Cubic and Close commands.

    Example:
        svgps generate drawing.svg drawing.svgcom --autocut
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    try:
        settings = SvgpsSettings(
            flatten=FlattenConfig(tolerance=tolerance),
            autocut=AutocutConfig(enabled=autocut, workers=workers),
            polish=PolishConfig(enabled=polish, min_length=min_length),
            reader=ReaderConfig(
                stroke_selection=StrokeSelection.STROKED if stroked_only else StrokeSelection.ALL
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level="INFO" if verbose else log_level,
            ),
        )
    except ValidationError as e:
        print_error("Invalid options", details=str(e))
        raise typer.Exit(code=1) from None

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    try:
        if not quiet:
            print_header(__version__)
            print_step("Loading document")

        with SvgReader(input_svg, settings.reader) as reader:
            document = reader.document()

        if not quiet:
            print_document_info(
                str(input_svg), document.width, document.height, len(document.shapes)
            )
            print_step("Processing")
            print_options(autocut, polish, workers)

        processor = DocumentProcessor(settings)
        stream = processor.generate(document)
        write_svgcom(output, stream)

        if not quiet:
            print_generate_success(str(output), _format_file_size(output), processor.stats)

    except DocumentLoadError as e:
        print_error(f"Could not load document: {e.reason}")
        raise typer.Exit(code=1) from None
    except DocumentSaveError as e:
        print_error(f"Could not save document: {e.reason}")
        raise typer.Exit(code=1) from None
    except SvgpsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


@app.command()
def render(
    input_svgcom: Annotated[
        Path,
        typer.Argument(help="Path to input .svgcom file", show_default=False),
    ],
    output: Annotated[
        Path,
        typer.Argument(help="Path to output SVG file", show_default=False),
    ],
    stroke: Annotated[
        str,
        typer.Option("--stroke", help="Stroke color"),
    ] = "#000000",
    stroke_width: Annotated[
        float,
        typer.Option("--stroke-width", help="Stroke width", min=0.0),
    ] = 1.0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Render a canonical path file as SVG for inspection.

    Example:
        svgps render drawing.svgcom preview.svg --stroke red --stroke-width 3
    """
    try:
        settings = SvgpsSettings(render=RenderConfig(stroke=stroke, stroke_width=stroke_width))
    except ValidationError as e:
        print_error("Invalid options", details=str(e))
        raise typer.Exit(code=1) from None

    configure_logging(quiet=quiet)

    try:
        stream = DocumentProcessor(settings).render(input_svgcom, output)
        if not quiet:
            print_render_success(str(output), stream)
    except DocumentLoadError as e:
        print_error(f"Could not load document: {e.reason}")
        raise typer.Exit(code=1) from None
    except FormatError as e:
        print_error(f"Malformed {e.field}: {e.reason}")
        raise typer.Exit(code=1) from None
    except SvgpsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
