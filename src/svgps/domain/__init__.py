"""Domain models for svgps.

This module contains the core domain models representing documents, shapes,
canonical paths and the persisted command stream. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Picklable for inter-process communication (parallel culling)
- Independent of the XML layer

Key classes:
- Point: A 2D point in viewbox space
- Move, Line, Cubic, Close: Canonical path commands
- Path: A sequence of canonical commands
- Shape / Document: Front end output consumed by the flattener
- CanonicalStream: What the .svgcom codec reads and writes
"""

from svgps.domain.path import (
    POINTS_PER_TAG,
    Close,
    Cubic,
    Line,
    Move,
    Path,
    PathCommand,
    Point,
)
from svgps.domain.shape import (
    ArcTo,
    ClosePath,
    CubicTo,
    Document,
    EllipseOutline,
    FillRule,
    LineTo,
    MoveTo,
    Outline,
    PathOutline,
    PolylineOutline,
    QuadTo,
    RectOutline,
    Segment,
    Shape,
)
from svgps.domain.stream import CanonicalStream

__all__: list[str] = [
    "POINTS_PER_TAG",
    # Canonical commands
    "Point",
    "Move",
    "Line",
    "Cubic",
    "Close",
    "PathCommand",
    "Path",
    # Source outlines
    "MoveTo",
    "LineTo",
    "QuadTo",
    "CubicTo",
    "ArcTo",
    "ClosePath",
    "Segment",
    "PathOutline",
    "RectOutline",
    "EllipseOutline",
    "PolylineOutline",
    "Outline",
    # Documents
    "FillRule",
    "Shape",
    "Document",
    "CanonicalStream",
]
