"""Document I/O layer for svgps.

This module handles reading SVG documents with svgelements, the canonical
.svgcom codec, and rendering canonical streams back to SVG.

Key responsibilities:
- Load SVG files and convert their shape elements to domain models
- Encode and decode the canonical path format
- Render canonical streams as SVG for inspection

Key classes:
- SvgReader: Load SVG files and extract shapes
- SvgWriter: Save canonical streams as SVG
"""

from svgps.io.codec import decode, encode, format_coordinate, read_svgcom, write_svgcom
from svgps.io.reader import SvgReader
from svgps.io.writer import SvgWriter, render_svg

__all__ = [
    "SvgReader",
    "SvgWriter",
    "decode",
    "encode",
    "format_coordinate",
    "read_svgcom",
    "render_svg",
    "write_svgcom",
]
