"""Command-line interface for svgps.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- generate: SVG to canonical path format, with optional autocut and polish
- render: canonical path format back to SVG
- Verbose/quiet output modes
"""

from svgps.cli.app import cli, main

__all__ = ["cli", "main"]
