"""Rich console output helpers for the CLI.

This module provides user-friendly console output using the Rich library.
"""

from rich.console import Console
from rich.text import Text

from svgps.domain import CanonicalStream
from svgps.utils import ProcessingStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]svgps[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_document_info(path: str, width: float, height: float, shape_count: int) -> None:
    """Print source document information.

    Args:
        path: Path to the SVG file
        width: Viewbox width
        height: Viewbox height
        shape_count: Number of drawable shapes
    """
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(f"  {width:g} x {height:g} {SYM_DOT} {shape_count:,} shapes")


def print_options(autocut: bool, polish: bool, workers: int) -> None:
    """Print the enabled pipeline stages."""
    stages = ["flatten"]
    if autocut:
        stages.append("autocut")
    if polish:
        stages.append("polish")
    console.print(f"  {' → '.join(stages)} {SYM_DOT} {workers} workers")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_generate_success(output_path: str, file_size: str, stats: ProcessingStats) -> None:
    """Print success message with a generate summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        stats: Statistics of the run
    """
    console.print(
        f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(stats.duration_seconds)}"
    )

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    console.print(
        f"  {stats.stroke_count} strokes {SYM_DOT} {stats.subpaths_emitted} sub-paths {SYM_DOT} "
        f"{stats.hidden_count} hidden {SYM_DOT} {stats.subpaths_dropped} dropped"
    )


def print_render_success(output_path: str, stream: CanonicalStream) -> None:
    """Print success message with a render summary."""
    console.print(f"\n[bold green]{SYM_OK} Rendered[/bold green]")
    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)
    console.print(
        f"  {stream.width} x {stream.height} {SYM_DOT} {stream.command_count:,} commands "
        f"{SYM_DOT} {len(stream.subpaths()):,} paths"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
