"""svgps - Convert SVG art into plotter-friendly path commands.

svgps is a CLI tool and library that reduces SVG drawings to a flat stream of
MoveTo/LineTo/CubicBezierCurveTo/ClosePath commands (the ``.svgcom`` format),
optionally removing the parts of stroked outlines that are hidden behind
filled shapes painted on top of them ("autocut").

Example:
    $ svgps generate ferris.svg ferris.svgcom --autocut
    $ svgps render ferris.svgcom ferris-converted.svg --stroke red

The first command writes the canonical command stream; the second turns it
back into an SVG for previewing.
"""

__version__ = "0.2.0"
__author__ = "Mark Lagodych"

__all__ = ["__author__", "__version__"]
